"""
submission.py — Order Submission Pipeline

Turns the current selection and form input into a stored order:

    1. refuse while another submission is in flight
    2. validate the form (nothing reaches the network if this fails)
    3. re-derive the price breakdown from the current input
    4. build the order payload with a snapshot of product name and prices
    5. hand it to the API
    6. after the server confirmed the write, reset the order selection

If the API call fails, OrderNotSavedError is raised and the selection is left
untouched so the customer can retry.
"""

import threading

import httpx

from storefront_service.logging_config import get_logger
from storefront_service.models import NewOrderRequest, Order

from .clients import StorefrontApiClient
from .errors import FormValidationError, OrderNotSavedError, SubmissionInProgress
from .pricing import normalize_quantity, price
from .selection import SelectionEngine
from .validation import OrderFields, validate

log = get_logger(__name__)


class OrderSubmissionPipeline:
    def __init__(self, engine: SelectionEngine, api: StorefrontApiClient):
        self._engine = engine
        self._api = api
        self._in_flight = threading.Lock()

    @property
    def in_flight(self) -> bool:
        """True while a submission is waiting for the server; the submit control stays disabled."""
        return self._in_flight.locked()

    def build_order(self, fields: OrderFields) -> NewOrderRequest:
        """
        Validates the form and assembles the order payload.

        Raises:
            FormValidationError: If any field is missing or invalid.
        """
        validity = validate(self._engine.state, fields)
        product = self._engine.order_product
        if not validity.ok or product is None:
            raise FormValidationError(validity.invalid_fields() or ["product"])

        quantity = normalize_quantity(fields.quantity)
        breakdown = price(product, quantity, fields.zone)
        return NewOrderRequest(
            productId=product.id,
            productName=product.name,
            regularPrice=product.regularPrice,
            offerPrice=product.offerPrice,
            quantity=quantity,
            size=fields.size,
            name=fields.name.strip(),
            phone=fields.phone.strip(),
            address=fields.address.strip(),
            deliveryArea=fields.zone,
            deliveryCharge=breakdown.delivery_charge,
            subtotal=breakdown.subtotal,
            total=breakdown.total,
        )

    def submit(self, fields: OrderFields) -> Order:
        """
        Submits the order described by the current selection and `fields`.

        Returns:
            Order: The stored order, including its server-assigned id.

        Raises:
            SubmissionInProgress: If a previous submission has not finished.
            FormValidationError: If the form is incomplete.
            OrderNotSavedError: If the server could not be reached or rejected the order.
        """
        if not self._in_flight.acquire(blocking=False):
            raise SubmissionInProgress("An order is already being submitted")

        try:
            request = self.build_order(fields)
            try:
                order = self._api.create_order(request)
            except httpx.HTTPError as e:
                log.error(f"Order for product {request.productId} was not saved: {e}")
                raise OrderNotSavedError("Your order could not be saved. Please try again.") from e

            log.info(f"[Order: {order.id}] Submitted: {order.quantity} x {order.productName}, total {order.total}.")
            self._engine.reset_after_submit()
            return order
        finally:
            self._in_flight.release()
