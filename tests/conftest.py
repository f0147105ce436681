import os

# Keep test runs from writing a log file into the working directory
os.environ.setdefault("LOG_FILE", "")

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront_client.clients import StorefrontApiClient
from storefront_service.main import create_app
from storefront_service.models import NewOrderRequest, Product
from storefront_service.store import OrderStore


@pytest.fixture()
def products():
    return [
        Product(id=1, name="Argentina Fan Jersey", regularPrice=900, offerPrice=850, image="arg.webp"),
        Product(id=2, name="Spain Player Jersey", regularPrice=1100, offerPrice=1050, image="esp.webp"),
        Product(id=3, name="Brazil Away Jersey", regularPrice=1100, offerPrice=1050, image="bra.webp"),
    ]


@pytest.fixture()
def order_payload():
    """Factory for a valid POST /api/orders body."""

    def make(**overrides):
        payload = {
            "productId": 2,
            "productName": "Spain Player Jersey",
            "regularPrice": 1100,
            "offerPrice": 1050,
            "quantity": 2,
            "size": "L",
            "name": "Rahim Uddin",
            "phone": "01712345678",
            "address": "House 12, Road 5, Dhanmondi",
            "deliveryArea": "inside",
            "deliveryCharge": 70,
            "subtotal": 2100,
            "total": 2170,
        }
        payload.update(overrides)
        return payload

    return make


@pytest.fixture()
def new_order(order_payload):
    """Factory for a valid NewOrderRequest."""

    def make(**overrides):
        return NewOrderRequest(**order_payload(**overrides))

    return make


@pytest.fixture()
def store(tmp_path):
    return OrderStore(tmp_path / "orders.json")


@pytest.fixture()
def public_dir(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<html>storefront</html>")
    (public / "admin.html").write_text("<html>admin</html>")
    return public


@pytest.fixture()
def app(store, products, public_dir):
    return create_app(store=store, products=products, public_dir=public_dir)


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def api(client):
    return StorefrontApiClient(http_client=client)


@pytest.fixture()
def unreachable_api():
    """API client whose every request fails with a connection error."""

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    http_client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://storefront.test")
    yield StorefrontApiClient(http_client=http_client)
    http_client.close()
