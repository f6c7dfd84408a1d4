"""
Per-line classification of licence server output.

The two dialects encode nesting differently: FlexNet ``lmstat`` indents with
spaces, Sentinel ``lsmon`` prefixes every field with a ``|-`` marker whose
column gives the depth. Each dialect has its own classifier so the two level
conventions are never mixed.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LineKind(str, Enum):
    """Role of a single output line."""

    PRODUCT_HEADER = "product_header"
    USER_DETAIL = "user_detail"
    FEATURE_BOUNDARY = "feature_boundary"
    LICENCE_BOUNDARY = "licence_boundary"
    KEY_VALUE = "key_value"
    NOISE = "noise"
    ERROR = "error"


# Lower-cased phrase -> message reported to the user.
SIMPLE_ERROR_MARKERS = {
    "cannot connect to license server": "Cannot connect to the license server.",
    "failed to resolve the server host": "Failed to resolve the server host.",
    "unable to connect": "Unable to connect to the license server.",
    "lmgrd is not running": "The license server daemon is not running.",
    "license server machine is down or not responding": "The license server is down or not responding.",
    "cannot find license file": "No license server or license file was found.",
}

VERBOSE_ERROR_MARKERS = {
    "failed to resolve the server host": "Failed to resolve the server host.",
    "unable to connect": "Unable to connect to the license server.",
    "error[3]": "Failed to resolve the server host.",
    "error[5]": "Timed out while attempting to reach the license server.",
}

MARKER = "|-"
FEATURE_INFORMATION = "Feature Information"
LICENCE_INFORMATION = "License Information"

_LEADING_WS = re.compile(r"^\s*")


@dataclass(frozen=True)
class ClassifiedLine:
    """A line together with its depth and role."""

    text: str
    level: int
    kind: LineKind
    key: str = ""
    value: Optional[str] = None
    error: str = ""


def indent_level(line: str) -> int:
    """Depth of a space-indented line: leading whitespace // 2."""
    return len(_LEADING_WS.match(line).group(0)) // 2


def marker_level(line: str) -> Optional[int]:
    """Depth of a ``|-`` prefixed line, or None without a marker."""
    idx = line.find(MARKER)
    if idx == -1:
        return None
    return max(idx - 1, 0) // 2


def split_key_value(line: str) -> tuple[str, Optional[str]]:
    """Split ``|- Key : "value"`` into ``("Key", "value")``.

    The value is None when the line has no colon (category headers).
    """
    key, sep, value = line.partition(":")
    key = key.replace(MARKER + " ", "").replace(MARKER, "").strip()
    if not sep:
        return key, None
    return key, value.replace('"', "").strip()


def find_error(line: str, markers: dict[str, str]) -> Optional[str]:
    """Return the message for the first connectivity phrase in ``line``."""
    lowered = line.lower()
    for phrase, message in markers.items():
        if phrase in lowered:
            return message
    return None


def classify_simple(line: str) -> ClassifiedLine:
    """Classify one line of FlexNet ``lmutil lmstat`` output."""
    error = find_error(line, SIMPLE_ERROR_MARKERS)
    level = indent_level(line)
    if error:
        return ClassifiedLine(line, level, LineKind.ERROR, error=error)

    if level == 0 and "Users of" in line:
        return ClassifiedLine(line, level, LineKind.PRODUCT_HEADER)
    if level == 2 and line.strip():
        return ClassifiedLine(line, level, LineKind.USER_DETAIL)
    return ClassifiedLine(line, level, LineKind.NOISE)


def classify_verbose(line: str) -> ClassifiedLine:
    """Classify one line of Sentinel RMS ``lsmon`` output."""
    error = find_error(line, VERBOSE_ERROR_MARKERS)
    level = marker_level(line)
    if error:
        return ClassifiedLine(line, level or 0, LineKind.ERROR, error=error)
    if level is None:
        return ClassifiedLine(line, 0, LineKind.NOISE)

    key, value = split_key_value(line)
    if value is None:
        if key == FEATURE_INFORMATION:
            return ClassifiedLine(line, level, LineKind.FEATURE_BOUNDARY, key=key)
        if key == LICENCE_INFORMATION:
            return ClassifiedLine(line, level, LineKind.LICENCE_BOUNDARY, key=key)
        return ClassifiedLine(line, level, LineKind.NOISE, key=key)
    return ClassifiedLine(line, level, LineKind.KEY_VALUE, key=key, value=value)
