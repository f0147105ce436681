"""
store.py — File-backed Order Store

Orders live in a single JSON array on disk. Every operation reads the whole
file, and every mutation rewrites the whole file before it returns, so no
in-memory state has to survive between requests or process restarts.

Concurrency:
    All mutations run under one lock (single-writer discipline). FastAPI executes
    the synchronous endpoints in a threadpool, so requests may arrive concurrently.

Failure handling:
    • Unreadable or malformed storage is logged and read as an empty collection.
    • A mutation over unreadable or malformed storage raises OrderStoreError and
      leaves the file untouched.
    • Fields a stored record carries beyond the order schema survive rewrites.
    • A failed write raises OrderStoreError; callers never see a success for it.
"""

import json
import os
import threading
import time
from pathlib import Path
from typing import Callable, List, Mapping

from pydantic import TypeAdapter, ValidationError

from .errors import OrderNotFound, OrderStoreError
from .lifecycle import ensure_transition
from .logging_config import get_logger
from .models import NewOrderRequest, Order, OrderStatus

ORDERS_FILE = os.environ.get("ORDERS_FILE", "orders.json")

log = get_logger(__name__)

_orders_adapter = TypeAdapter(List[Order])


class OrderStore:
    """
    Append-and-patch log of orders persisted as JSON.

    Order ids are epoch milliseconds at creation time, bumped past the highest
    stored id whenever the clock has not moved on, so they are unique and
    strictly increasing.
    """

    def __init__(self, path=ORDERS_FILE, clock: Callable[[], float] = time.time):
        self.path = Path(path)
        self._clock = clock
        self._lock = threading.Lock()

    def list(self) -> List[Order]:
        """Returns every stored order in storage order. Sorting is up to the caller."""
        return self._read()

    def get(self, order_id: int) -> Order:
        """
        Raises:
            OrderNotFound: If no order has this id.
        """
        for order in self._read():
            if order.id == order_id:
                return order
        raise OrderNotFound(order_id)

    def create(self, request: NewOrderRequest) -> Order:
        """
        Stores a new order.

        Args:
            request (NewOrderRequest): The order fields sent by the order form.

        Returns:
            Order: The stored order with its new id and status Pending.

        Raises:
            OrderStoreError: If the order file could not be read or written.
        """
        with self._lock:
            orders = self._read(strict=True)
            order = Order(
                **request.model_dump(),
                id=self._next_id(orders),
                status=OrderStatus.PENDING,
            )
            orders.append(order)
            self._write(orders)

        log.info(f"[Order: {order.id}] Created for product {order.productId} (total {order.total}).")
        return order

    def patch(self, order_id: int, fields: Mapping) -> Order:
        """
        Merges `fields` over the stored order (shallow merge) and persists it.

        Fields absent from `fields` keep their stored value. An `id` entry is
        ignored. A status change must follow the order lifecycle.

        Args:
            order_id (int): Id of the order to update.
            fields (Mapping): Partial order fields, e.g. {"status": "Confirmed"}.

        Returns:
            Order: The merged order as stored.

        Raises:
            OrderNotFound: If no order has this id. Nothing is written.
            InvalidStatusTransition: If the status change is not allowed. Nothing is written.
            pydantic.ValidationError: If the merged order is not a valid order.
            OrderStoreError: If the order file could not be read or written.
        """
        changes = {key: value for key, value in fields.items() if key != "id"}
        log_prefix = f"[Order: {order_id}]"

        with self._lock:
            orders = self._read(strict=True)
            for index, current in enumerate(orders):
                if current.id == order_id:
                    break
            else:
                log.warning(f"{log_prefix} Patch rejected: order not found.")
                raise OrderNotFound(order_id)

            if "status" in changes:
                ensure_transition(current.status, OrderStatus(changes["status"]))

            merged = Order.model_validate({**current.model_dump(), **changes, "id": current.id})
            orders[index] = merged
            self._write(orders)

        if merged.status != current.status:
            log.info(f"{log_prefix} Status changed: {current.status.value} -> {merged.status.value}.")
        else:
            log.info(f"{log_prefix} Updated fields: {sorted(changes)}.")
        return merged

    # -------------------- persistence --------------------

    def _next_id(self, orders: List[Order]) -> int:
        now_ms = int(self._clock() * 1000)
        highest = max((order.id for order in orders), default=0)
        return max(now_ms, highest + 1)

    def _read(self, strict: bool = False) -> List[Order]:
        """
        Loads every stored order. A missing or blank file holds no orders.

        With `strict`, an unreadable or malformed file raises OrderStoreError
        instead of reading as empty. Mutations read strictly so that they never
        rewrite a file whose records they could not load.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            log.error(f"Error reading orders file {self.path}: {e}")
            if strict:
                raise OrderStoreError(f"Could not read orders file {self.path}") from e
            return []

        try:
            return _orders_adapter.validate_json(raw.strip() or "[]")
        except ValidationError as e:
            if strict:
                log.error(f"Orders file {self.path} is malformed, refusing to overwrite it: {e}")
                raise OrderStoreError(f"Orders file {self.path} is malformed") from e
            log.error(f"Orders file {self.path} is malformed, treating it as empty: {e}")
            return []

    def _write(self, orders: List[Order]) -> None:
        payload = json.dumps(
            [order.model_dump(mode="json") for order in orders],
            indent=2,
            ensure_ascii=False,
        )
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            log.critical(f"Could not write orders file {self.path}: {e}")
            raise OrderStoreError(f"Could not write orders file {self.path}") from e
