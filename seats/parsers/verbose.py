"""
Parser for Sentinel RMS ``lsmon`` output (the "verbose" dialect).

Every field is a ``|- Key : value`` line; depth comes from the marker column::

     |- Feature Information
       |- Feature name                   : "SAP"
       |- Feature version                : "2023"
       |- License Information
         |- Maximum concurrent user(s)   : 5
         |- Expiration date              : License has no expiration.
       |- Client Information
         |- User name                    : "jdoe"
         |- Status                       : "Running since Mon Oct 14 09:05:12 2024"
"""

import logging
from dataclasses import dataclass
from enum import Enum

from seats.aggregator import LicenceAggregator
from seats.classifier import ClassifiedLine, LineKind, classify_verbose
from seats.errors import MalformedLineError
from seats.models import LicenceUser
from seats.parsers.base import DialectParser
from seats.timestamps import parse_full_timestamp

logger = logging.getLogger(__name__)

FEATURE_NAME = "Feature name"
FEATURE_VERSION = "Feature version"
MAX_USERS = "Maximum concurrent user(s)"
EXPIRATION_DATE = "Expiration date"
USER_NAME = "User name"
STATUS = "Status"

NO_EXPIRATION = "License has no expiration"
RUNNING_SINCE = "Running since"


class VerboseState(str, Enum):
    IDLE = "idle"
    IN_FEATURE_BLOCK = "in_feature_block"
    IN_LICENCE_LINES = "in_licence_lines"
    IN_USER_LINES = "in_user_lines"


@dataclass
class _Pass:
    state: VerboseState = VerboseState.IDLE
    feature: str = ""
    product: str = ""
    pending_seats: int = 0
    user: str = ""


class VerboseDialectParser(DialectParser):
    """Key/value block dialect; a repeated user holds one more seat."""

    name = "verbose"

    def new_state(self) -> _Pass:
        return _Pass()

    def classify(self, raw: str) -> ClassifiedLine:
        return classify_verbose(raw)

    def handle(self, line: ClassifiedLine, state: _Pass, aggregator: LicenceAggregator) -> None:
        if line.kind == LineKind.FEATURE_BOUNDARY:
            self._close_feature(state, aggregator)
            state.state = VerboseState.IN_FEATURE_BLOCK
            return
        if line.kind == LineKind.LICENCE_BOUNDARY:
            state.state = VerboseState.IN_LICENCE_LINES
            return
        if line.kind not in (LineKind.KEY_VALUE, LineKind.NOISE) or not line.key:
            return

        # Back at feature depth: seats read so far were never confirmed.
        if state.state == VerboseState.IN_LICENCE_LINES and line.level == 1:
            state.state = VerboseState.IN_FEATURE_BLOCK
            state.pending_seats = 0

        if line.kind == LineKind.KEY_VALUE:
            self._apply_field(line.key, line.value, state, aggregator)

    def finish(self, state: _Pass, aggregator: LicenceAggregator) -> None:
        self._drop_if_empty(state, aggregator)

    def _apply_field(self, key: str, value: str, state: _Pass, aggregator: LicenceAggregator) -> None:
        if key == FEATURE_NAME:
            state.feature, state.product = value, ""
            return
        if not state.feature:
            return

        if key == FEATURE_VERSION:
            if not state.product:
                state.product = f"{state.feature} {value}".strip()
                aggregator.register(state.product)
        elif state.product not in aggregator:
            return
        elif key == MAX_USERS and state.state == VerboseState.IN_LICENCE_LINES:
            try:
                state.pending_seats += int(value)
            except ValueError as exc:
                raise MalformedLineError(f"Bad seat count {value!r}") from exc
        elif key == EXPIRATION_DATE and state.state == VerboseState.IN_LICENCE_LINES:
            self._close_licence(value, state, aggregator)
        elif key == USER_NAME:
            self._add_user(value, state, aggregator)
        elif key == STATUS and state.state == VerboseState.IN_USER_LINES:
            user = aggregator.user(state.product, state.user)
            if user is not None:
                since = value.replace(RUNNING_SINCE, "").strip()
                user.checkout_time = parse_full_timestamp(since)

    def _close_licence(self, value: str, state: _Pass, aggregator: LicenceAggregator) -> None:
        seats, state.pending_seats = state.pending_seats, 0
        state.state = VerboseState.IN_FEATURE_BLOCK

        if value.rstrip(".") != NO_EXPIRATION:
            expires = parse_full_timestamp(value)
            today = self.clock().replace(hour=0, minute=0, second=0, microsecond=0)
            if today > expires:
                logger.debug("Discarding %d expired seat(s) of %s", seats, state.product)
                return

        aggregator.get(state.product).seats_available += seats

    def _add_user(self, value: str, state: _Pass, aggregator: LicenceAggregator) -> None:
        state.state = VerboseState.IN_USER_LINES
        state.user = value
        if not value:
            return
        users = aggregator.get(state.product).users
        if value in users:
            users[value].seats_in_use += 1
        else:
            users[value] = LicenceUser(name=value)

    def _close_feature(self, state: _Pass, aggregator: LicenceAggregator) -> None:
        self._drop_if_empty(state, aggregator)
        state.feature = state.product = state.user = ""
        state.pending_seats = 0

    def _drop_if_empty(self, state: _Pass, aggregator: LicenceAggregator) -> None:
        licence = aggregator.get(state.product) if state.product else None
        if licence is not None and licence.seats_available == 0:
            logger.debug("Removing %s: no unexpired seats", state.product)
            aggregator.remove(state.product)
