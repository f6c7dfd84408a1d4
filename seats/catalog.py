"""
Product code catalogue.

FlexNet feature lines carry short vendor codes ("RVT", "ACDLT") instead of
product names. The catalogue rewrites a parsed code into its display name
before it becomes a key in the aggregate. It is built once at start-up and is
read-only afterwards.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

logger = logging.getLogger(__name__)


DEFAULT_PRODUCTS = {
    "RVT": "Revit",
    "RVTLT": "Revit LT",
    "ACD": "AutoCAD",
    "ACDLT": "AutoCAD LT",
    "ARCHDESK": "AutoCAD Architecture",
    "BLDSYS": "AutoCAD MEP",
    "CIV3D": "Civil 3D",
    "MAP": "AutoCAD Map 3D",
    "INVPROSA": "Inventor Professional",
    "NAVMAN": "Navisworks Manage",
    "NAVSIM": "Navisworks Simulate",
    "RSAPRO": "Robot Structural Analysis",
    "AECCOL_T_F": "AEC Collection",
    "PDCOLL": "Product Design Collection",
}


class ProductCatalog:
    """Immutable mapping from vendor product code to display name."""

    def __init__(self, products: Optional[Mapping[str, str]] = None):
        if products is None:
            products = DEFAULT_PRODUCTS
        self._products = MappingProxyType(dict(products))

    @classmethod
    def from_json(cls, path: str, base: Optional[Mapping[str, str]] = None) -> "ProductCatalog":
        """Load a site catalogue from a JSON object file.

        Entries in the file extend (and override) ``base``, which defaults to
        the built-in table.

        Args:
            path: JSON file containing ``{"CODE": "Display name", ...}``.
            base: Mapping the file is merged over.

        Raises:
            ValueError: If the file does not hold a JSON object of strings.
        """
        data = json.loads(Path(path).read_text())
        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise ValueError(f"Product catalogue {path} must be a JSON object of strings")

        merged = dict(DEFAULT_PRODUCTS if base is None else base)
        merged.update(data)
        logger.info("Loaded %d product code(s) from %s", len(data), path)
        return cls(merged)

    def resolve(self, code: str) -> str:
        """Return the display name for ``code``, or ``code`` if it is unmapped."""
        return self._products.get(code, code)

    def items(self):
        return self._products.items()

    def __contains__(self, code) -> bool:
        return code in self._products

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self) -> Iterator[str]:
        return iter(self._products)

    def __getitem__(self, code: str) -> str:
        return self._products[code]


@lru_cache(maxsize=1)
def default_catalog() -> ProductCatalog:
    """Catalogue configured for this process (built on first use)."""
    from config.settings import PRODUCT_CATALOG_PATH

    if PRODUCT_CATALOG_PATH:
        return ProductCatalog.from_json(PRODUCT_CATALOG_PATH)
    return ProductCatalog()
