"""Project-wide settings and defaults."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()  # Load .env file if present

# Base paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.environ.get("SEATS_DATA_DIR", str(PROJECT_ROOT / "data")))

# Licence server query
LICENCE_DIALECT = os.environ.get("LICENCE_DIALECT", "simple")
LICENCE_SERVER = os.environ.get("LICENCE_SERVER", "")
LMUTIL_PATH = os.environ.get("LMUTIL_PATH", "lmutil")
LSMON_PATH = os.environ.get("LSMON_PATH", "lsmon")
QUERY_TIMEOUT_SECONDS = int(os.environ.get("QUERY_TIMEOUT_SECONDS", "60"))

# Offline testing: parse this file instead of querying the server
OVERRIDE_FILE = os.environ.get("OVERRIDE_FILE", "")
SNAPSHOT_FILE = os.environ.get("SNAPSHOT_FILE", str(DATA_DIR / "latest-output.txt"))

# Product names
PRODUCT_CATALOG_PATH = os.environ.get("PRODUCT_CATALOG_PATH", "")
PRODUCT_FILTER = [
    p.strip()
    for p in os.environ.get("PRODUCT_FILTER", "Revit,AutoCAD,Robot,SAP,Etab,Safe").split(",")
    if p.strip()
]

# Refresh
MIN_REFRESH_INTERVAL_SECONDS = int(os.environ.get("MIN_REFRESH_INTERVAL_SECONDS", "60"))
REFRESH_INTERVAL_SECONDS = int(os.environ.get("REFRESH_INTERVAL_SECONDS", "60"))
SCHEDULER_ENABLED = os.environ.get("SCHEDULER_ENABLED", "true").lower() == "true"

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def executable_for(dialect: str) -> str:
    """Configured query executable for a canonical dialect name."""
    return LSMON_PATH if dialect == "verbose" else LMUTIL_PATH
