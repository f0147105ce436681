"""
pricing.py — Order Price Breakdown

Pure functions only: no I/O, no errors. Unknown or missing input degrades
to the neutral value (quantity 1, delivery charge 0).
"""

import re
from dataclasses import dataclass

from storefront_service.models import DeliveryZone, Product

DELIVERY_CHARGES = {
    DeliveryZone.INSIDE: 70,
    DeliveryZone.OUTSIDE: 130,
}

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: int
    delivery_charge: int
    total: int


def normalize_quantity(quantity) -> int:
    """
    Parses a quantity as the order form sends it. The leading integer counts,
    so "2.5" and "2pcs" are 2. Anything below 1 or unparsable becomes 1.
    """
    if quantity is None:
        return 1
    match = _LEADING_INT.match(str(quantity))
    if match is None:
        return 1
    return max(int(match.group(1)), 1)


def delivery_charge(zone) -> int:
    """70 inside Dhaka, 130 outside, 0 when no zone is chosen."""
    try:
        return DELIVERY_CHARGES[DeliveryZone(zone)]
    except ValueError:
        return 0


def price(product: Product, quantity=1, zone=None) -> PriceBreakdown:
    """
    Computes the order summary for a product.

    Args:
        product (Product): The product being ordered.
        quantity: Requested quantity; normalized with `normalize_quantity`.
        zone: "inside", "outside", a DeliveryZone, or anything else for no charge.

    Returns:
        PriceBreakdown: subtotal (offerPrice x quantity), delivery charge and total.
    """
    subtotal = product.offerPrice * normalize_quantity(quantity)
    charge = delivery_charge(zone)
    return PriceBreakdown(subtotal=subtotal, delivery_charge=charge, total=subtotal + charge)
