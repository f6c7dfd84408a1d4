"""Timestamp formats found in licence server output."""

import re
from datetime import datetime

from seats.errors import MalformedLineError

# "Mon 10/14 9:05" -- lmstat omits the year.
_START_PATTERN = re.compile(
    r"(?P<weekday>[A-Za-z]{3})\s+(?P<month>\d{1,2})/(?P<day>\d{1,2})\s+"
    r"(?P<hour>\d{1,2}):(?P<minute>\d{2})"
)

_FULL_FORMATS = (
    "%a %b %d %H:%M:%S %Y",
    "%a %B %d %H:%M:%S %Y",
)


def infer_year(month: int, now: datetime) -> int:
    """Year of a year-less date seen at ``now``.

    A month later than the current one can only be last year's (the session
    wrapped around New Year).
    """
    if month > now.month:
        return now.year - 1
    return now.year


def parse_start_time(text: str, now: datetime) -> datetime:
    """Parse an lmstat ``start`` stamp; tokens after the minutes are ignored."""
    match = _START_PATTERN.search(text)
    if not match:
        raise MalformedLineError(f"Unrecognised start time: {text!r}")

    month = int(match.group("month"))
    try:
        return datetime(
            infer_year(month, now),
            month,
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
        )
    except ValueError as exc:
        raise MalformedLineError(f"Invalid start time {text!r}: {exc}") from exc


def parse_full_timestamp(text: str) -> datetime:
    """Parse ``"Mon Oct 14 09:05:12 2024"`` (abbreviated or full month name)."""
    normalized = " ".join(text.split()).rstrip(".")
    for fmt in _FULL_FORMATS:
        try:
            return datetime.strptime(normalized, fmt)
        except ValueError:
            continue
    raise MalformedLineError(f"Unrecognised timestamp: {text!r}")
