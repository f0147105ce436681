"""
admin.py — Admin Order Board

Lists orders newest first and changes their status. Failures are reported
through the `notify` callback instead of being swallowed.
"""

from typing import Callable, List, Optional

import httpx

from storefront_service.lifecycle import next_statuses
from storefront_service.logging_config import get_logger
from storefront_service.models import DeliveryZone, Order, OrderStatus

from .clients import StorefrontApiClient
from .session import log_notification

log = get_logger(__name__)

DELIVERY_LABELS = {
    DeliveryZone.INSIDE: "Dhaka",
    DeliveryZone.OUTSIDE: "Outside Dhaka",
}


def delivery_label(order: Order) -> str:
    return DELIVERY_LABELS.get(order.deliveryArea, "")


class AdminBoard:
    def __init__(self, api: StorefrontApiClient, notify: Optional[Callable[[str], None]] = None):
        self.api = api
        self.notify = notify or log_notification
        self.orders: List[Order] = []

    def refresh(self) -> List[Order]:
        """
        Reloads the order list, newest first. On failure the previous list is kept.
        """
        try:
            orders = self.api.list_orders()
        except httpx.HTTPError as e:
            log.error(f"Failed to load orders: {e}")
            self.notify("Orders could not be loaded.")
            return self.orders

        self.orders = sorted(orders, key=lambda order: order.id, reverse=True)
        return self.orders

    @staticmethod
    def status_choices(order: Order) -> List[OrderStatus]:
        """Statuses the board offers for an order: its current one and the allowed next ones."""
        return next_statuses(order.status)

    def set_status(self, order_id: int, status) -> Optional[Order]:
        """
        Changes the status of an order.

        Returns:
            Order: The updated order, or None if the change failed (the user was notified).
        """
        status = OrderStatus(status)
        log_prefix = f"[Order: {order_id}]"
        try:
            updated = self.api.update_order(order_id, {"status": status})
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                self.notify(f"Order {order_id} no longer exists.")
            elif e.response.status_code == 409:
                self.notify(e.response.json().get("error", f"Order {order_id} cannot be set to {status.value}."))
            else:
                self.notify(f"Status of order {order_id} could not be updated.")
            return None
        except httpx.TransportError as e:
            log.error(f"{log_prefix} Status update failed: {e}")
            self.notify(f"Status of order {order_id} could not be updated.")
            return None

        self.orders = [updated if order.id == order_id else order for order in self.orders]
        log.info(f"{log_prefix} Status set to {updated.status.value}.")
        return updated
