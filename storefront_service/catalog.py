"""
catalog.py — Product Catalog

The catalog is read-only. It comes from the JSON file named by the
CATALOG_FILE environment variable, or from the built-in list below when
that variable is not set.
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter

from .logging_config import get_logger
from .models import Product

CATALOG_FILE = os.environ.get("CATALOG_FILE", "")

log = get_logger(__name__)

_UPLOADS = "https://gameongarb.com/public/uploads/product"
_PRODUCT_PAGES = "https://gameongarb.com/product"

DEFAULT_PRODUCTS: List[Product] = [
    Product(
        id=144,
        name="Argentina Player Version World Cup 2026 Jersey (Full Sleeve)",
        regularPrice=1350,
        offerPrice=1300,
        image=f"{_UPLOADS}/1765346289-argentina-player-version-full-sleeve-worldcup-26.webp",
        link=f"{_PRODUCT_PAGES}/argentina-player-version-world-cup-2026-jersey-%28full-sleeve%29-144",
        edition="Player",
    ),
    Product(
        id=161,
        name="Argentina Fan Version World Cup 2026 Jersey (Half Sleeve)",
        regularPrice=900,
        offerPrice=850,
        image=f"{_UPLOADS}/1765346083-argentina-fan-version-half-sleeve-worldcup-26.webp",
        link=f"{_PRODUCT_PAGES}/argentina-fan-version-world-cup-2026-jersey-%28half-sleeve%29-161",
        edition="Fan",
    ),
    Product(
        id=162,
        name="Portugal Fan Version World Cup 2026 Jersey (Half Sleeve)",
        regularPrice=900,
        offerPrice=850,
        image=f"{_UPLOADS}/1765345849-portugal-fan-version-half-sleeve-worldcup-26.webp",
        link=f"{_PRODUCT_PAGES}/portugal-fan-version-world-cup-2026-jersey-%28half-sleeve%29-161",
        edition="Fan",
    ),
    Product(
        id=114,
        name="Spain Player Version Home Jersey – World Cup 2026",
        regularPrice=1100,
        offerPrice=1050,
        image=f"{_UPLOADS}/1764838789-spain-player-version-home-jersey-world-cup-26.webp",
        link=f"{_PRODUCT_PAGES}/spain-player-version-home-jersey-%E2%80%93-world-cup-2026-114",
        edition="Player",
    ),
    Product(
        id=110,
        name="Mexico Full Sleeve Player Version Home Jersey – World Cup 2026",
        regularPrice=1300,
        offerPrice=1250,
        image=f"{_UPLOADS}/1764838340-mexico-full-sleeve-player-version-home-jersey-world-cup-26.webp",
        link=f"{_PRODUCT_PAGES}/mexico-full-sleeve-player-version-home-jersey-%E2%80%93-world-cup-2026-110",
        edition="Player",
    ),
    Product(
        id=105,
        name="Brazil Player Version Away Jersey – World Cup 2026",
        regularPrice=1100,
        offerPrice=1050,
        image=f"{_UPLOADS}/1764836976-brazil-player-version-away-jersey-2026-world-cup.webp",
        link=f"{_PRODUCT_PAGES}/brazil-player-version-away-jersey-%E2%80%93-world-cup-2026-105",
        edition="Player",
    ),
]

_products_adapter = TypeAdapter(List[Product])


def load_catalog(path: Optional[str] = None) -> List[Product]:
    """
    Loads the product catalog.

    Args:
        path (str, optional): JSON file holding an array of products. Falls back
            to CATALOG_FILE, then to DEFAULT_PRODUCTS.

    Returns:
        List[Product]: The products in display order.

    Raises:
        OSError: If the catalog file cannot be read.
        pydantic.ValidationError: If the file does not hold valid products.
    """
    path = path or CATALOG_FILE
    if not path:
        return list(DEFAULT_PRODUCTS)

    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    products = _products_adapter.validate_python(raw)
    log.info(f"Loaded catalog with {len(products)} products from {path}.")
    return products
