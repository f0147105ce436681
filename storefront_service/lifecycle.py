"""
Order lifecycle state machine.

    Pending   -> Confirmed | Cancelled
    Confirmed -> Delivered | Cancelled
    Delivered, Cancelled: terminal

Re-writing the current status is always accepted so that a patch repeating
the stored values leaves the order unchanged.
"""

from .errors import InvalidStatusTransition
from .models import OrderStatus

VALID_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def is_terminal(status: OrderStatus) -> bool:
    return not VALID_TRANSITIONS[status]


def next_statuses(current: OrderStatus) -> list[OrderStatus]:
    """Statuses an admin may pick for an order in `current`, current one first."""
    allowed = VALID_TRANSITIONS[current]
    return [current] + [status for status in OrderStatus if status in allowed]


def is_valid_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    """True if `requested` may follow `current`."""
    return requested == current or requested in VALID_TRANSITIONS[current]


def ensure_transition(current: OrderStatus, requested: OrderStatus) -> None:
    """
    Raises:
        InvalidStatusTransition: If the lifecycle does not allow the change.
    """
    if not is_valid_transition(current, requested):
        raise InvalidStatusTransition(current, requested)
