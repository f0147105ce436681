"""
models.py — Data Models for the Storefront

This module defines the data structures shared by the server and the client engine.
It uses Pydantic models to ensure type safety and automatic validation of incoming data.
Attribute names follow the camelCase keys of the JSON surface.

Models:
    - Product: A catalog item with its regular and offer price.
    - NewOrderRequest: The order payload posted by the order form.
    - Order: A persisted order with its server-assigned id and status.
    - OrderPatch: A partial set of order fields sent by the admin board.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

PHONE_PATTERN = r"^01[0-9]{9}$"


class OrderStatus(str, Enum):
    """Lifecycle states of an order. Transitions live in `lifecycle.py`."""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class DeliveryZone(str, Enum):
    INSIDE = "inside"    # Dhaka
    OUTSIDE = "outside"  # Outside Dhaka


class ProductSize(str, Enum):
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "2XL"


class Product(BaseModel):
    """
    Represents a single catalog item.

    Attributes:
        id (int): Stable product identity.
        name (str): Display name.
        regularPrice (int): Undiscounted price in whole currency units.
        offerPrice (int): Discounted price, never above the regular price.
        image (str): Image reference.
        link (str, optional): Product page on the shop.
        edition (str, optional): "Player" or "Fan".
    """
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    regularPrice: int = Field(..., ge=0)
    offerPrice: int = Field(..., ge=0)
    image: str
    link: Optional[str] = None
    edition: Optional[str] = None

    @model_validator(mode="after")
    def _offer_not_above_regular(self):
        if self.offerPrice > self.regularPrice:
            raise ValueError("offerPrice must not exceed regularPrice")
        return self


class NewOrderRequest(BaseModel):
    """
    Represents an order as submitted by the order form, before the server
    assigns an id and a status.

    The product name and prices are a snapshot taken at order time so that
    later catalog changes never alter historical orders.

    Attributes:
        productId (int): Catalog identity of the ordered product.
        productName (str): Product name at order time.
        regularPrice (int): Regular price at order time.
        offerPrice (int): Offer price at order time.
        quantity (int): Number of items. Must be at least one.
        size (ProductSize): Chosen size.
        name (str): Customer name.
        phone (str): Local 11-digit mobile number starting with 01.
        address (str): Delivery address.
        deliveryArea (DeliveryZone): Inside or outside Dhaka.
        deliveryCharge (int): Charge for the delivery zone.
        subtotal (int): offerPrice x quantity.
        total (int): subtotal + deliveryCharge.
    """
    productId: int
    productName: str
    regularPrice: int = Field(..., ge=0)
    offerPrice: int = Field(..., ge=0)
    quantity: int = Field(1, ge=1)
    size: ProductSize
    name: str = Field(..., min_length=1)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    address: str = Field(..., min_length=1)
    deliveryArea: DeliveryZone
    deliveryCharge: int = Field(..., ge=0)
    subtotal: int = Field(..., ge=0)
    total: int = Field(..., ge=0)


class Order(NewOrderRequest):
    """
    A persisted order: every NewOrderRequest field plus the server-assigned
    identity and the current lifecycle status.

    Unknown keys on a stored record are kept, so rewriting the order file
    never drops data written by another version.
    """
    model_config = ConfigDict(extra="allow")

    id: int
    status: OrderStatus = OrderStatus.PENDING

    @property
    def placed_at(self) -> datetime:
        """Creation time, recovered from the millisecond-based id."""
        return datetime.fromtimestamp(self.id / 1000, tz=timezone.utc)


class OrderPatch(BaseModel):
    """
    Partial update of an order. Only the fields present in the request body
    are applied; the order id can never be changed through a patch.
    """
    productId: Optional[int] = None
    productName: Optional[str] = None
    regularPrice: Optional[int] = Field(None, ge=0)
    offerPrice: Optional[int] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=1)
    size: Optional[ProductSize] = None
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = Field(None, min_length=1)
    deliveryArea: Optional[DeliveryZone] = None
    deliveryCharge: Optional[int] = Field(None, ge=0)
    subtotal: Optional[int] = Field(None, ge=0)
    total: Optional[int] = Field(None, ge=0)
    status: Optional[OrderStatus] = None

    def changes(self) -> dict:
        """Returns only the fields the caller actually sent. Explicit nulls are dropped."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
