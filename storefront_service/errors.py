"""
errors.py — Domain Errors of the Order Store

The FastAPI layer in `main.py` maps each of these to an HTTP response.
"""


class OrderNotFound(LookupError):
    """Raised when an operation targets an order id that does not exist."""

    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class InvalidStatusTransition(ValueError):
    """Raised when a patch tries to move an order along an edge the lifecycle does not allow."""

    def __init__(self, current, requested):
        super().__init__(f"Cannot change status from {current.value} to {requested.value}")
        self.current = current
        self.requested = requested


class OrderStoreError(RuntimeError):
    """Raised when the order file cannot be read for a change or cannot be written. The change was not saved."""
