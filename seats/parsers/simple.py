"""
Parser for FlexNet ``lmutil lmstat -a`` output (the "simple" dialect).

    Users of 12345RVT_2024_0F:  (Total of 10 licenses issued;  Total of 1 license in use)

      "12345RVT_2024_0F" v1.000, vendor: adskflex, expiry: permanent(no expiration date)
      floating license

        jdoe ws01 ws01 (v1.0) (lic01/27000 1102), start Mon 10/14 9:05

One header per product at column 0, one line per active user indented four
spaces.
"""

import re
from dataclasses import dataclass

from seats.aggregator import LicenceAggregator
from seats.classifier import ClassifiedLine, LineKind, classify_simple
from seats.errors import MalformedLineError
from seats.models import LicenceUser
from seats.parsers.base import DialectParser
from seats.timestamps import parse_start_time

# Leading digits are an Autodesk product-line id of no fixed width.
HEADER_PATTERN = re.compile(r"^Users of \d*(?P<code>[A-Za-z_]\w*?)(?:_\d+_0F)*:")
SEATS_PATTERN = re.compile(r"(?P<seats>\d+) licenses? issued")
SUFFIX_PATTERN = re.compile(r"_\d{4}_0F")
USER_PATTERN = re.compile(
    r"^\s+(?P<user>\S.*?) (?P<host>\S+) (?P<display>\S+) \(.*\), start (?P<start>.+)$"
)


@dataclass
class _Pass:
    product: str = ""


class SimpleDialectParser(DialectParser):
    """Header-and-user-line dialect; first occurrence of a user wins."""

    name = "simple"

    def new_state(self) -> _Pass:
        return _Pass()

    def classify(self, raw: str) -> ClassifiedLine:
        return classify_simple(raw)

    def handle(self, line: ClassifiedLine, state: _Pass, aggregator: LicenceAggregator) -> None:
        if line.kind == LineKind.PRODUCT_HEADER:
            # Lines below a broken header belong to no product.
            state.product = ""
            name, seats = self.parse_header(line.text)
            aggregator.register(name, seats)
            state.product = name
        elif line.kind == LineKind.USER_DETAIL and state.product in aggregator:
            self._add_user(line.text, state.product, aggregator)

    def parse_header(self, text: str) -> tuple[str, int]:
        """Return ``(product name, seats issued)`` from a "Users of" line."""
        match = HEADER_PATTERN.match(text)
        if not match:
            raise MalformedLineError(f"Unrecognised product header: {text!r}")
        seats = SEATS_PATTERN.search(text, match.end())
        if not seats:
            raise MalformedLineError(f"No seat count in header: {text!r}")

        code = SUFFIX_PATTERN.sub("", match.group("code"))
        return self.catalog.resolve(code), int(seats.group("seats"))

    def _add_user(self, text: str, product: str, aggregator: LicenceAggregator) -> None:
        match = USER_PATTERN.match(text)
        if not match:
            raise MalformedLineError(f"Unrecognised user line: {text!r}")

        user_name = match.group("user").strip()
        if not user_name:
            return
        checkout = parse_start_time(match.group("start"), self.clock())

        users = aggregator.get(product).users
        if user_name not in users:
            users[user_name] = LicenceUser(name=user_name, checkout_time=checkout)
