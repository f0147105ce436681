"""
selection.py — Carousel / Order Selection Synchronization

The storefront tracks two notions of "current product":

    display_index     which catalog item the hero carousel shows
    order_product_id  which catalog item the order form targets

They are allowed to diverge: a shopper may browse slide 3 while keeping
product 1 in the order form. Each trigger has its own entry point:

    Trigger              display_index            order_product_id
    -------------------  -----------------------  -------------------
    autoplay tick        +1 (wraps)               unchanged
    prev / next / dot    target                   unchanged
    slide click          target                   target's product
    grid card click      product's position       clicked product
    dropdown change      product's position       chosen product
    catalog load         0                        first product
    order submitted      unchanged                first product

Every transition replaces the whole SelectionState under the engine lock,
so an observer never sees one field updated without the other. The
autoplay thread and user input both call into the same engine.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from storefront_service.logging_config import get_logger
from storefront_service.models import Product

from .errors import UnknownProductError

log = get_logger(__name__)


class Trigger(str, Enum):
    AUTOPLAY = "autoplay"
    NAVIGATE = "navigate"
    SLIDE_CLICK = "slide_click"
    CARD_CLICK = "card_click"
    DROPDOWN = "dropdown"
    CATALOG_LOAD = "catalog_load"
    ORDER_RESET = "order_reset"


# Triggers that move the page to the order form
SCROLLS_TO_FORM = frozenset({Trigger.SLIDE_CLICK, Trigger.CARD_CLICK})

# Triggers that give the carousel a full quiet period before the next autoplay tick
_RESTARTS_AUTOPLAY = frozenset({
    Trigger.NAVIGATE,
    Trigger.SLIDE_CLICK,
    Trigger.CARD_CLICK,
    Trigger.DROPDOWN,
})


@dataclass(frozen=True)
class SelectionState:
    display_index: int = 0
    order_product_id: Optional[int] = None


Listener = Callable[[Trigger, SelectionState], None]


class SelectionEngine:
    """
    Owns the catalog snapshot and the current SelectionState.

    Args:
        on_user_action (callable, optional): Called with no arguments after every
            manual navigation or selection. The storefront session passes
            `AutoplayScheduler.restart` here.
    """

    def __init__(self, on_user_action: Optional[Callable[[], None]] = None):
        self._lock = threading.RLock()
        self._products: Tuple[Product, ...] = ()
        self._positions: dict = {}
        self._state = SelectionState()
        self._listeners: List[Listener] = []
        self.on_user_action = on_user_action

    # -------------------- read access --------------------

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._products

    @property
    def displayed_product(self) -> Optional[Product]:
        with self._lock:
            if not self._products:
                return None
            return self._products[self._state.display_index]

    @property
    def order_product(self) -> Optional[Product]:
        with self._lock:
            product_id = self._state.order_product_id
            if product_id is None:
                return None
            return self._products[self._positions[product_id]]

    def index_of(self, product_id: int) -> int:
        """
        Raises:
            UnknownProductError: If the id is not in the current catalog.
        """
        try:
            return self._positions[product_id]
        except KeyError:
            raise UnknownProductError(product_id) from None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers `listener(trigger, state)`; returns a function that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # -------------------- triggers --------------------

    def load_catalog(self, products: Sequence[Product]) -> SelectionState:
        """Installs a new catalog; shows the first slide and selects the first product."""
        products = tuple(products)
        positions = {product.id: index for index, product in enumerate(products)}
        if len(positions) != len(products):
            raise ValueError("Catalog contains duplicate product ids")

        with self._lock:
            self._products = products
            self._positions = positions
            first_id = products[0].id if products else None
            return self._commit(Trigger.CATALOG_LOAD, SelectionState(0, first_id))

    def autoplay_tick(self, still_due: Optional[Callable[[], bool]] = None) -> SelectionState:
        """
        Advances the carousel by one slide. Never touches the order selection.

        Args:
            still_due (callable, optional): Checked under the engine lock; when it
                returns False the tick is dropped. The autoplay scheduler uses it so
                that a tick racing a user action cannot cut the quiet period short.
        """
        with self._lock:
            if not self._products:
                return self._state
            if still_due is not None and not still_due():
                return self._state
            next_index = (self._state.display_index + 1) % len(self._products)
            return self._commit(
                Trigger.AUTOPLAY,
                SelectionState(next_index, self._state.order_product_id),
            )

    def show(self, index: int) -> SelectionState:
        """
        Dot navigation: shows slide `index` and keeps the order selection.

        Raises:
            IndexError: If `index` is outside the catalog.
        """
        with self._lock:
            self._check_index(index)
            return self._commit(
                Trigger.NAVIGATE,
                SelectionState(index, self._state.order_product_id),
            )

    def show_next(self) -> SelectionState:
        with self._lock:
            if not self._products:
                return self._state
            return self.show((self._state.display_index + 1) % len(self._products))

    def show_previous(self) -> SelectionState:
        with self._lock:
            if not self._products:
                return self._state
            count = len(self._products)
            return self.show((self._state.display_index - 1 + count) % count)

    def click_slide(self, index: int) -> SelectionState:
        """
        Shows slide `index` and makes its product the order selection.

        Raises:
            IndexError: If `index` is outside the catalog.
        """
        with self._lock:
            self._check_index(index)
            return self._commit(
                Trigger.SLIDE_CLICK,
                SelectionState(index, self._products[index].id),
            )

    def click_card(self, product_id: int) -> SelectionState:
        """
        Grid card click: selects the product for the order and moves the
        carousel to it.

        Raises:
            UnknownProductError: If the id is not in the current catalog.
        """
        return self._select(Trigger.CARD_CLICK, product_id)

    def choose_product(self, product_id: int) -> SelectionState:
        """
        Order dropdown change: same synchronization as a card click.

        Raises:
            UnknownProductError: If the id is not in the current catalog.
        """
        return self._select(Trigger.DROPDOWN, product_id)

    def reset_after_submit(self) -> SelectionState:
        """Selects the first product again; the carousel stays where it is."""
        with self._lock:
            first_id = self._products[0].id if self._products else None
            return self._commit(
                Trigger.ORDER_RESET,
                SelectionState(self._state.display_index, first_id),
            )

    # -------------------- internals --------------------

    def _select(self, trigger: Trigger, product_id: int) -> SelectionState:
        with self._lock:
            index = self.index_of(product_id)
            return self._commit(trigger, SelectionState(index, product_id))

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._products):
            raise IndexError(f"Slide {index} is outside the catalog ({len(self._products)} products)")

    def _commit(self, trigger: Trigger, state: SelectionState) -> SelectionState:
        # Caller holds self._lock
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(trigger, state)
            except Exception:
                log.exception(f"Selection listener failed on {trigger.value}.")

        if trigger in _RESTARTS_AUTOPLAY and self.on_user_action is not None:
            self.on_user_action()
        return state
