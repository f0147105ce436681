"""
This module provides the communication client for the storefront REST API.
It is used by the order form session and by the admin order board.
The client logs transport and HTTP failures and re-raises them; it never retries.
"""

import os
from typing import List, Mapping, Optional

import httpx
from pydantic import TypeAdapter

from storefront_service.logging_config import get_logger
from storefront_service.models import NewOrderRequest, Order, Product

# Service address (normally from env vars)
STOREFRONT_API_URL = os.environ.get("STOREFRONT_API_URL", "http://localhost:3000")

log = get_logger(__name__)

_products_adapter = TypeAdapter(List[Product])
_orders_adapter = TypeAdapter(List[Order])


class StorefrontApiClient:
    """
    Client for the storefront REST API.
    Handles catalog reads, order creation and order updates.

    Args:
        base_url (str): API root. Defaults to STOREFRONT_API_URL.
        http_client (httpx.Client, optional): Preconfigured client, e.g. a
            FastAPI TestClient. It is not closed by `close()`.
    """

    def __init__(self, base_url: str = STOREFRONT_API_URL, http_client: Optional[httpx.Client] = None):
        if http_client is not None:
            self.client = http_client
            self._owns_client = False
        else:
            timeout_config = httpx.Timeout(5.0, read=8.0)
            self.client = httpx.Client(base_url=base_url, timeout=timeout_config)
            self._owns_client = True

    def close(self):
        """Closes the HTTP client session if this instance created it."""
        if self._owns_client:
            self.client.close()

    def fetch_products(self) -> List[Product]:
        """
        Loads the catalog.
        Returns:
            List[Product]: Products in display order.
        Raises:
            httpx.HTTPError: If the request fails or the server answers with an error status.
        """
        response = self._request("GET", "/api/products")
        return _products_adapter.validate_python(response.json())

    def list_orders(self) -> List[Order]:
        """
        Loads every stored order, unsorted.
        Raises:
            httpx.HTTPError: If the request fails or the server answers with an error status.
        """
        response = self._request("GET", "/api/orders")
        return _orders_adapter.validate_python(response.json())

    def create_order(self, order: NewOrderRequest) -> Order:
        """
        Submits a new order.
        Args:
            order (NewOrderRequest): The complete order payload.
        Returns:
            Order: The stored order including its id and status.
        Raises:
            httpx.HTTPError: If the order may not have been saved.
        """
        response = self._request("POST", "/api/orders", json=order.model_dump(mode="json"))
        return Order.model_validate(response.json()["order"])

    def update_order(self, order_id: int, fields: Mapping) -> Order:
        """
        Sends a partial update for an order.
        Args:
            order_id (int): Id of the order.
            fields (Mapping): Fields to change, e.g. {"status": "Confirmed"}.
        Returns:
            Order: The merged order as stored by the server.
        Raises:
            httpx.HTTPStatusError: 404 if the order does not exist, 409 for an
                illegal status transition.
            httpx.TransportError: If the server could not be reached.
        """
        payload = {key: getattr(value, "value", value) for key, value in fields.items()}
        response = self._request("PUT", f"/api/orders/{order_id}", json=payload)
        return Order.model_validate(response.json()["order"])

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, path, **kwargs)
            response.raise_for_status()  # HTTPStatusError for 4xx/5xx
            return response
        except httpx.HTTPStatusError as e:
            log.error(f"{method} {path} failed with HTTP {e.response.status_code}: {e.response.text}")
            raise
        except httpx.TransportError as e:
            log.error(f"{method} {path} could not reach the storefront API: {e}")
            raise
