"""
validation.py — Order Form Validation

`can_submit()` gates the submit action. `validate()` reports every field on
its own so the form can highlight what is missing.
"""

import re
from dataclasses import dataclass, fields as dataclass_fields
from typing import List, Optional, Union

from storefront_service.models import PHONE_PATTERN, DeliveryZone, ProductSize

_PHONE_RE = re.compile(PHONE_PATTERN)

_ZONES = {zone.value for zone in DeliveryZone}
_SIZES = {size.value for size in ProductSize}


@dataclass(frozen=True)
class OrderFields:
    """
    Free-text and choice fields of the order form, as typed by the customer.

    Attributes:
        name (str): Customer name.
        phone (str): Mobile number, e.g. "01712345678".
        address (str): Delivery address.
        size (str): One of M, L, XL, 2XL; empty until chosen.
        zone (str): "inside" or "outside"; empty until chosen.
        quantity: Raw quantity input; normalized by the pricing calculator.
    """
    name: str = ""
    phone: str = ""
    address: str = ""
    size: str = ""
    zone: str = ""
    quantity: Union[int, str] = 1


@dataclass(frozen=True)
class FieldValidity:
    product: bool
    name: bool
    phone: bool
    zone: bool
    address: bool
    size: bool

    @property
    def ok(self) -> bool:
        return all(getattr(self, f.name) for f in dataclass_fields(self))

    def invalid_fields(self) -> List[str]:
        return [f.name for f in dataclass_fields(self) if not getattr(self, f.name)]


def _choice(value) -> str:
    # Enum members and plain strings compare by value
    return getattr(value, "value", value) or ""


def is_valid_phone(phone: Optional[str]) -> bool:
    """Local format: 11 digits starting with 01."""
    return bool(_PHONE_RE.match((phone or "").strip()))


def validate(selection, fields: OrderFields) -> FieldValidity:
    """
    Checks every order form field.

    Args:
        selection (SelectionState): Current selection; only `order_product_id` is used.
        fields (OrderFields): Current form input.

    Returns:
        FieldValidity: One flag per field.
    """
    return FieldValidity(
        product=selection is not None and selection.order_product_id is not None,
        name=bool((fields.name or "").strip()),
        phone=is_valid_phone(fields.phone),
        zone=_choice(fields.zone) in _ZONES,
        address=bool((fields.address or "").strip()),
        size=_choice(fields.size) in _SIZES,
    )


def can_submit(selection, fields: OrderFields) -> bool:
    return validate(selection, fields).ok
