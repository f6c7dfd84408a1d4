"""
Dialect parsers for licence server output.

``simple``  FlexNet ``lmutil lmstat -a`` (aliases: lmutil, flexlm)
``verbose`` Sentinel RMS ``lsmon`` (aliases: lsmon, sentinel)
"""

from datetime import datetime
from typing import Callable, Optional

from seats.catalog import ProductCatalog
from seats.parsers.base import DialectParser
from seats.parsers.simple import SimpleDialectParser
from seats.parsers.verbose import VerboseDialectParser

DIALECTS = {
    "simple": SimpleDialectParser,
    "verbose": VerboseDialectParser,
}

ALIASES = {
    "lmutil": "simple",
    "flexlm": "simple",
    "lsmon": "verbose",
    "sentinel": "verbose",
}


def dialect_name(dialect: str) -> str:
    """Canonical dialect name for ``dialect`` or one of its aliases."""
    key = dialect.strip().lower()
    key = ALIASES.get(key, key)
    if key not in DIALECTS:
        choices = ", ".join(sorted([*DIALECTS, *ALIASES]))
        raise ValueError(f"Unknown licence output dialect: {dialect!r} (expected one of {choices})")
    return key


def get_parser(
    dialect: str,
    catalog: Optional[ProductCatalog] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> DialectParser:
    """Build the parser for ``dialect``."""
    return DIALECTS[dialect_name(dialect)](catalog=catalog, clock=clock)


__all__ = [
    "DIALECTS",
    "DialectParser",
    "SimpleDialectParser",
    "VerboseDialectParser",
    "dialect_name",
    "get_parser",
]
