"""Shared driver for the line-oriented dialect parsers."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional

from seats.aggregator import LicenceAggregator
from seats.catalog import ProductCatalog
from seats.classifier import ClassifiedLine, LineKind
from seats.errors import ConnectivityError, MalformedLineError

logger = logging.getLogger(__name__)


class DialectParser(ABC):
    """Turn one raw output blob into a ``LicenceAggregator``.

    Subclasses supply the line classifier and a per-pass state machine.
    Parsers keep no state between calls and may be reused.
    """

    name = ""

    def __init__(
        self,
        catalog: Optional[ProductCatalog] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.catalog = catalog if catalog is not None else ProductCatalog()
        self.clock = clock or datetime.now

    def parse(self, text: str, into: Optional[LicenceAggregator] = None) -> LicenceAggregator:
        """Parse ``text`` into a fresh aggregate.

        Args:
            text: Full captured output of the licence query tool.
            into: Aggregate to overwrite on success. Left untouched if the
                parse fails.

        Returns:
            The rebuilt aggregate (``into`` when given).

        Raises:
            ConnectivityError: The output reports an unreachable server.
        """
        staging = LicenceAggregator()
        state = self.new_state()
        skipped = 0

        for raw in (text or "").splitlines():
            line = self.classify(raw)
            if line.kind == LineKind.ERROR:
                logger.debug("Connectivity marker in %s output: %r", self.name, raw)
                raise ConnectivityError(line.error, phrase=raw.strip())
            try:
                self.handle(line, state, staging)
            except MalformedLineError as exc:
                skipped += 1
                logger.debug("Skipping malformed line: %s", exc)

        self.finish(state, staging)
        logger.info(
            "Parsed %d licence(s) from %s output (%d line(s) skipped)",
            len(staging), self.name, skipped,
        )

        if into is None:
            return staging
        into.replace(staging)
        return into

    def finish(self, state, aggregator: LicenceAggregator) -> None:
        """Hook run after the last line."""

    @abstractmethod
    def new_state(self):
        """Return the mutable state for one pass."""

    @abstractmethod
    def classify(self, raw: str) -> ClassifiedLine:
        """Classify one raw line."""

    @abstractmethod
    def handle(self, line: ClassifiedLine, state, aggregator: LicenceAggregator) -> None:
        """Apply one classified line to the pass state and aggregate."""
