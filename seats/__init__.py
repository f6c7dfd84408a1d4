"""
Licence seat monitor.

Parses the status dump of a licence-management utility (FlexNet ``lmutil
lmstat`` or Sentinel RMS ``lsmon``) into per-product seat counts and the users
currently holding them.
"""

from seats.aggregator import LicenceAggregator
from seats.catalog import ProductCatalog
from seats.errors import ConnectivityError, LicenceQueryError, QueryToolError
from seats.models import Licence, LicenceUser
from seats.monitor import LicenceMonitor
from seats.parsers import get_parser
from seats.source import LicenceSource

__all__ = [
    "ConnectivityError",
    "Licence",
    "LicenceAggregator",
    "LicenceMonitor",
    "LicenceQueryError",
    "LicenceSource",
    "LicenceUser",
    "ProductCatalog",
    "QueryToolError",
    "get_parser",
]
