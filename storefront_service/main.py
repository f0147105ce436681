"""
main.py — FastAPI Entry Point for the Storefront

This module provides the REST API used by the storefront page and the admin
order board.

Responsibilities:
    • Serve the product catalog
    • Accept new orders and persist them through the OrderStore
    • List orders and apply partial updates (status changes) to them
    • Serve the single-page application for every other GET path
    • Provide system health information
"""

import os
import re
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, JSONResponse

from .catalog import load_catalog
from .errors import InvalidStatusTransition, OrderNotFound, OrderStoreError
from .logging_config import setup_logging, get_logger
from .models import NewOrderRequest, OrderPatch
from .store import OrderStore

PUBLIC_DIR = os.environ.get("PUBLIC_DIR", str(Path(__file__).resolve().parent.parent / "public"))
PORT = int(os.environ.get("PORT", "3000"))

# Initialization
# Configure logging before the application object is created
setup_logging()
log = get_logger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def parse_order_id(raw: str) -> int:
    """
    Reads an order id from a path segment. Leading whitespace is skipped and
    the leading integer is used, so "17abc" is 17.

    Raises:
        OrderNotFound: If the segment does not start with an integer.
    """
    match = _LEADING_INT.match(raw)
    if match is None:
        raise OrderNotFound(raw)
    return int(match.group(1))


def create_app(store=None, products=None, public_dir=None) -> FastAPI:
    """
    Builds the storefront application.

    Args:
        store (OrderStore, optional): Order store to use. Defaults to one backed by ORDERS_FILE.
        products (list[Product], optional): Catalog to serve. Defaults to `load_catalog()`.
        public_dir (str, optional): Directory of the single-page application. Defaults to PUBLIC_DIR.

    Returns:
        FastAPI: The configured application.
    """
    app = FastAPI(title="Storefront")
    app.state.store = store if store is not None else OrderStore()
    app.state.products = list(products) if products is not None else load_catalog()
    app.state.public_dir = Path(public_dir or PUBLIC_DIR).resolve()

    @app.on_event("startup")
    def on_startup():
        log.info(
            f"Storefront starting: {len(app.state.products)} products, "
            f"orders in {app.state.store.path}, pages from {app.state.public_dir}."
        )

    # Error mapping: store errors → JSON responses
    @app.exception_handler(OrderNotFound)
    async def order_not_found(request: Request, exc: OrderNotFound):
        return JSONResponse(status_code=404, content={"error": "Order not found"})

    @app.exception_handler(InvalidStatusTransition)
    async def invalid_transition(request: Request, exc: InvalidStatusTransition):
        return JSONResponse(status_code=409, content={"error": str(exc)})

    @app.exception_handler(OrderStoreError)
    async def store_failure(request: Request, exc: OrderStoreError):
        return JSONResponse(status_code=500, content={"error": "Order could not be saved"})

    @app.get("/health")
    def health_check():
        """
        Simple health check endpoint for monitoring systems or container orchestrators.
        """
        return {"status": "ok"}

    @app.get("/api/products")
    def list_products():
        """Returns the catalog in display order."""
        return [product.model_dump() for product in app.state.products]

    @app.get("/api/orders")
    def list_orders():
        """Returns every stored order. The admin board sorts them newest first."""
        return [order.model_dump(mode="json") for order in app.state.store.list()]

    @app.post("/api/orders")
    def place_order(order: NewOrderRequest):
        """
        Receives a new order from the order form and stores it.

        The server assigns the id and the initial status "Pending".

        Returns:
            dict: {"success": True, "order": <stored order>}

        Raises:
            OrderStoreError: Mapped to HTTP 500 when the order could not be saved.
        """
        log.info(f"New order received for product {order.productId} ({order.quantity} x {order.size.value}).")
        stored = app.state.store.create(order)
        return {"success": True, "order": stored.model_dump(mode="json")}

    @app.put("/api/orders/{order_id}")
    def update_order(order_id: str, patch: OrderPatch):
        """
        Applies a partial update (typically a status change) to an existing order.

        Returns:
            dict: {"success": True, "order": <merged order>}

        Raises:
            OrderNotFound: Mapped to HTTP 404 {"error": "Order not found"}. A non-numeric id is
                never an existing order.
            InvalidStatusTransition: Mapped to HTTP 409.
            OrderStoreError: Mapped to HTTP 500.
        """
        merged = app.state.store.patch(parse_order_id(order_id), patch.changes())
        return {"success": True, "order": merged.model_dump(mode="json")}

    # Catch-all: static files, otherwise index.html (SPA fallback).
    # Registered last so it never shadows the API routes.
    @app.get("/{full_path:path}")
    def serve_page(full_path: str):
        root = app.state.public_dir
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_relative_to(root) and candidate.is_file():
            return FileResponse(candidate)

        index = root / "index.html"
        if index.is_file():
            return FileResponse(index)
        return JSONResponse(status_code=404, content={"error": "Not found"})

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)
