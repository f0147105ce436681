"""
session.py — Storefront Page Session

StorefrontSession is the context object of one open storefront page. It owns
the catalog snapshot, the selection engine, the autoplay timer, the order
form input and the submission pipeline, and wires them together:

    autoplay timer ──tick──▶ SelectionEngine ◀── user triggers
          ▲                        │
          └──── restart ◀──────────┘ (manual navigation / selection)

Lifecycle: `initialize()` loads the catalog and starts autoplay; `dispose()`
cancels the timer and releases the HTTP client.
"""

import dataclasses
from typing import Callable, Optional

import httpx

from storefront_service.logging_config import get_logger
from storefront_service.models import Order

from .autoplay import AUTOPLAY_INTERVAL, AutoplayScheduler
from .clients import StorefrontApiClient
from .pricing import PriceBreakdown, price
from .selection import SelectionEngine
from .submission import OrderSubmissionPipeline
from .validation import FieldValidity, OrderFields, can_submit, validate

log = get_logger(__name__)


def log_notification(message: str) -> None:
    log.warning(f"[Notification] {message}")


class StorefrontSession:
    """
    Args:
        api (StorefrontApiClient, optional): API client; one for STOREFRONT_API_URL by default.
        autoplay_interval (float): Seconds between carousel slides.
        notify (callable, optional): Non-blocking user notification, called with a message.
            Defaults to a log warning.
    """

    def __init__(
        self,
        api: Optional[StorefrontApiClient] = None,
        autoplay_interval: float = AUTOPLAY_INTERVAL,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.api = api if api is not None else StorefrontApiClient()
        self.engine = SelectionEngine()
        self.autoplay = AutoplayScheduler(self.engine.autoplay_tick, interval=autoplay_interval)
        self.engine.on_user_action = self.autoplay.restart
        self.pipeline = OrderSubmissionPipeline(self.engine, self.api)
        self.fields = OrderFields()
        self.notify = notify or log_notification

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()

    def initialize(self) -> bool:
        """
        Loads the catalog, selects its first product and starts autoplay.

        Returns:
            bool: False if the catalog could not be loaded; the user has been notified.
        """
        try:
            products = self.api.fetch_products()
        except httpx.HTTPError as e:
            log.error(f"Failed to load products: {e}")
            self.notify("Products could not be loaded. Please refresh the page.")
            return False

        self.engine.load_catalog(products)
        if products:
            self.autoplay.start()
        log.info(f"Storefront session ready with {len(products)} products.")
        return True

    def dispose(self) -> None:
        self.autoplay.stop()
        self.api.close()

    # -------------------- order form --------------------

    def update_fields(self, **changes) -> OrderFields:
        """Applies form input, e.g. `update_fields(zone="inside", quantity=2)`."""
        self.fields = dataclasses.replace(self.fields, **changes)
        return self.fields

    def summary(self) -> Optional[PriceBreakdown]:
        """Price breakdown for the selected product, or None before the catalog is loaded."""
        product = self.engine.order_product
        if product is None:
            return None
        return price(product, self.fields.quantity, self.fields.zone)

    def validity(self) -> FieldValidity:
        return validate(self.engine.state, self.fields)

    def can_submit(self) -> bool:
        return not self.pipeline.in_flight and can_submit(self.engine.state, self.fields)

    def submit(self) -> Order:
        """
        Submits the order and clears the form on success.

        Raises:
            SubmissionInProgress, FormValidationError, OrderNotSavedError: See
                `OrderSubmissionPipeline.submit`. The form is kept on failure.
        """
        order = self.pipeline.submit(self.fields)
        self.fields = OrderFields()
        return order
