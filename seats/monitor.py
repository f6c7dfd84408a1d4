"""Refresh loop state: the published aggregate and the seat watch list."""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Iterable, Iterator, Optional

from seats.aggregator import LicenceAggregator
from seats.errors import LicenceQueryError
from seats.parsers import DialectParser
from seats.source import LicenceSource

logger = logging.getLogger(__name__)


class LicenceMonitor:
    """Owns the aggregate readers see and rebuilds it on refresh.

    A refresh parses into a new aggregate and publishes it by swapping the
    reference, so readers never observe a half-built map. When a refresh
    fails the previous aggregate stays published.
    """

    def __init__(
        self,
        source: LicenceSource,
        parser: DialectParser,
        min_refresh_interval: int = 60,
        product_filter: Iterable[str] = (),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.source = source
        self.parser = parser
        self.min_refresh_interval = timedelta(seconds=min_refresh_interval)
        self.product_filter = tuple(product_filter)
        self.clock = clock or datetime.now

        self._licences = LicenceAggregator()
        self._refresh_lock = threading.Lock()
        self._watch_lock = threading.Lock()
        self._watches: set[str] = set()

        self.last_refreshed: Optional[datetime] = None
        self.refresh_failed = False
        self.last_error = ""

    @property
    def licences(self) -> LicenceAggregator:
        return self._licences

    # ---- Refresh ----

    def refresh_due(self) -> bool:
        if self.last_refreshed is None or self.refresh_failed:
            return True
        return self.clock() - self.last_refreshed >= self.min_refresh_interval

    def refresh(self, force: bool = False) -> bool:
        """Query, parse and publish a new aggregate.

        Returns:
            False when the refresh was skipped (throttled, or another refresh
            is already running), True when a new aggregate was published.

        Raises:
            LicenceQueryError: The query failed; the previous aggregate is kept.
        """
        if not force and not self.refresh_due():
            logger.debug("Refresh skipped: last refresh at %s", self.last_refreshed)
            return False
        if not self._refresh_lock.acquire(blocking=False):
            logger.debug("Refresh skipped: another refresh is running")
            return False

        started = self.clock()
        try:
            text = self.source.fetch()
            licences = self.parser.parse(text)
        except LicenceQueryError as exc:
            self.refresh_failed = True
            self.last_error = str(exc)
            logger.warning("Licence refresh failed: %s", exc)
            raise
        else:
            self._licences = licences
            self.refresh_failed = False
            self.last_error = ""
            return True
        finally:
            self.last_refreshed = started
            self._refresh_lock.release()

    # ---- Queries ----

    def users_of(self, name: str) -> Iterator[str]:
        return self._licences.users_of(name, now=self.clock())

    def usage_summary(self, name: str) -> str:
        return self._licences.usage_summary(name)

    def visible_products(
        self, show_all: bool = False, licences: Optional[LicenceAggregator] = None,
    ) -> list[str]:
        """Product names, limited to the configured filter unless ``show_all``.

        Pass the ``licences`` snapshot already held by the caller so names and
        records come from the same aggregate.
        """
        names = (licences if licences is not None else self._licences).names()
        if show_all or not self.product_filter:
            return names
        return [n for n in names if any(f in n for f in self.product_filter)]

    def status(self) -> dict:
        return {
            "dialect": self.parser.name,
            "server": self.source.server,
            "override_active": self.source.override_active,
            "licence_count": len(self._licences),
            "last_refreshed": self.last_refreshed.isoformat() if self.last_refreshed else None,
            "refresh_failed": self.refresh_failed,
            "last_error": self.last_error,
            "watching": self.watches(),
        }

    # ---- Seat watch ----

    def watch(self, name: str) -> bool:
        """Start waiting for a free seat of ``name``.

        Returns False if a seat is already free.
        """
        if self._licences.has_free_seat(name):
            return False
        with self._watch_lock:
            self._watches.add(name)
        logger.info("Waiting for licence: %s", name)
        return True

    def unwatch(self, name: str) -> bool:
        with self._watch_lock:
            if name in self._watches:
                self._watches.discard(name)
                return True
        return False

    def watches(self) -> list[str]:
        with self._watch_lock:
            return sorted(self._watches)

    def check_watches(self) -> list[str]:
        """Names on the watch list that now have a free seat.

        Reported names are removed from the list.
        """
        with self._watch_lock:
            available = sorted(n for n in self._watches if self._licences.has_free_seat(n))
            self._watches.difference_update(available)
        for name in available:
            logger.info("Licence available: %s", name)
        return available


def build_monitor(
    dialect: Optional[str] = None,
    server: Optional[str] = None,
    override_file: Optional[str] = None,
) -> LicenceMonitor:
    """Monitor wired from ``config.settings``; arguments override settings."""
    from config import settings
    from seats.catalog import default_catalog
    from seats.parsers import dialect_name, get_parser

    name = dialect_name(dialect or settings.LICENCE_DIALECT)
    source = LicenceSource(
        name,
        server=settings.LICENCE_SERVER if server is None else server,
        executable=settings.executable_for(name),
        override_file=override_file or settings.OVERRIDE_FILE or None,
        snapshot_file=settings.SNAPSHOT_FILE or None,
        timeout=settings.QUERY_TIMEOUT_SECONDS,
    )
    return LicenceMonitor(
        source,
        get_parser(name, catalog=default_catalog()),
        min_refresh_interval=settings.MIN_REFRESH_INTERVAL_SECONDS,
        product_filter=settings.PRODUCT_FILTER,
    )
