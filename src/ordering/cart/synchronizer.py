"""Cart synchronizer — one cart view for guests and signed-in shoppers.

A guest's lines live in a ``GuestCartStore`` on the client. Once the shopper
signs in, the guest lines are merged into the server cart, the guest store is
emptied, and the synchronizer mirrors the server cart through the live cart
feed. Whatever the state, callers see the same ``items``, ``total`` and
``count``.

While signed in with a non-empty cart, an idle timer is re-armed on every
change. If it fires, the cart contents are recorded as abandoned.
"""

import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from ordering.cart.abandonment import ABANDONED_CART_IDLE_SECONDS, SnapshotAbandonedCart
from ordering.cart.cart import Cart
from ordering.cart.feed import cart_feed
from ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import MergeGuestCart
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


class GuestCartStore(ABC):
    """Client-side persistence for a guest's cart lines."""

    @abstractmethod
    def load(self) -> list[dict]: ...

    @abstractmethod
    def save(self, items: list[dict]) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


class InMemoryGuestCartStore(GuestCartStore):
    def __init__(self, items=None):
        self._items = [dict(item) for item in items or []]

    def load(self):
        return [dict(item) for item in self._items]

    def save(self, items):
        self._items = [dict(item) for item in items]

    def clear(self):
        self._items = []


class JsonFileGuestCartStore(GuestCartStore):
    """Keeps the full guest list as a JSON array in a single file."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self):
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable guest cart", path=str(self.path))
            return []
        return data if isinstance(data, list) else []

    def save(self, items):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(items), encoding="utf-8")

    def clear(self):
        self.path.unlink(missing_ok=True)


def line_from_product(product, quantity=1):
    """Build a cart line dict from a product dict.

    Accepts either ``id`` or ``product_id``; falls back to the first entry of
    ``images`` when there is no single ``image``.
    """
    images = product.get("images") or []
    if isinstance(images, str):
        images = json.loads(images)
    return {
        "product_id": str(product.get("product_id") or product["id"]),
        "name": product.get("name"),
        "price": product["price"],
        "image": product.get("image") or (images[0] if images else ""),
        "quantity": quantity,
    }


class CartSynchronizer:
    """Presents a single live cart regardless of authentication state.

    Args:
        guest_store: Where guest lines are kept while signed out.
        domain: The ordering domain; commands are processed inside its context.
        idle_seconds: Idle window before a signed-in cart is recorded as abandoned.
        timer_factory: ``threading.Timer``-compatible factory for the idle timer.
        feed: The live cart feed to subscribe to on sign-in.
    """

    def __init__(
        self,
        guest_store: GuestCartStore,
        domain=None,
        idle_seconds: float = ABANDONED_CART_IDLE_SECONDS,
        timer_factory=threading.Timer,
        feed=None,
    ):
        self.guest_store = guest_store
        self.domain = domain or ordering
        self.idle_seconds = idle_seconds
        self.timer_factory = timer_factory
        self.feed = feed or cart_feed

        self.user_id = None
        self.items = self.guest_store.load()
        self._unsubscribe = None
        self._idle_timer = None
        self._lock = threading.RLock()

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------
    @property
    def signed_in(self):
        return self.user_id is not None

    @property
    def total(self):
        return sum(item["price"] * item["quantity"] for item in self.items)

    @property
    def count(self):
        return sum(item["quantity"] for item in self.items)

    # -------------------------------------------------------------------
    # Authentication transitions
    # -------------------------------------------------------------------
    def sign_in(self, user_id):
        """Merge the guest cart into ``user_id``'s server cart and start mirroring it."""
        if self.signed_in:
            self.sign_out()

        self.user_id = str(user_id)
        self._unsubscribe = self.feed.subscribe(self.user_id, self._on_server_change)

        guest_items = self.guest_store.load()
        if guest_items:
            self._process(
                MergeGuestCart(
                    user_id=self.user_id,
                    guest_cart_items=json.dumps(guest_items),
                )
            )
        self.guest_store.clear()

        logger.info("Cart synchronizer signed in", user_id=self.user_id, guest_lines=len(guest_items))
        self.refresh()

    def sign_out(self):
        self.close()
        self.user_id = None
        self._set_items(self.guest_store.load())

    def close(self):
        """Stop listening to the feed and cancel any pending idle timer."""
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        self._cancel_idle_timer()

    # -------------------------------------------------------------------
    # Cart operations
    # -------------------------------------------------------------------
    def add_to_cart(self, product, quantity=1):
        line = line_from_product(product, quantity)
        if self.signed_in:
            self._process(AddToCart(user_id=self.user_id, **line))
            self.refresh()
            return

        items = self.guest_store.load()
        existing = next((item for item in items if item["product_id"] == line["product_id"]), None)
        if existing:
            existing.update({key: value for key, value in line.items() if key != "quantity"})
            existing["quantity"] += quantity
            if existing["quantity"] <= 0:
                items.remove(existing)
        elif quantity > 0:
            items.append(line)
        self._save_guest(items)

    def update_quantity(self, product_id, quantity):
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return

        if self.signed_in:
            self._process(UpdateCartQuantity(user_id=self.user_id, product_id=str(product_id), quantity=quantity))
            self.refresh()
            return

        items = self.guest_store.load()
        for item in items:
            if item["product_id"] == str(product_id):
                item["quantity"] = quantity
        self._save_guest(items)

    def remove_from_cart(self, product_id):
        if self.signed_in:
            self._process(RemoveFromCart(user_id=self.user_id, product_id=str(product_id)))
            self.refresh()
            return

        items = [item for item in self.guest_store.load() if item["product_id"] != str(product_id)]
        self._save_guest(items)

    def clear(self):
        if self.signed_in:
            self._process(ClearCart(user_id=self.user_id))
            self.refresh()
            return
        self._save_guest([])

    def refresh(self):
        """Replace the view with the current server cart, or the guest store when signed out."""
        if not self.signed_in:
            self._set_items(self.guest_store.load())
            return

        with self.domain.domain_context():
            try:
                cart = self.domain.repository_for(Cart).get(self.user_id)
                items = cart.snapshot()
            except ObjectNotFoundError:
                items = []
        self._set_items(items)

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _process(self, command):
        with self.domain.domain_context():
            return self.domain.process(command, asynchronous=False)

    def _save_guest(self, items):
        self.guest_store.save(items)
        self._set_items(items)

    def _on_server_change(self, user_id):
        if user_id == self.user_id:
            self.refresh()

    def _set_items(self, items):
        with self._lock:
            self.items = items
            self._rearm_idle_timer()

    def _rearm_idle_timer(self):
        self._cancel_idle_timer()
        if not self.signed_in or not self.items:
            return

        timer = self.timer_factory(
            self.idle_seconds,
            self._record_abandoned,
            args=(self.user_id, [dict(item) for item in self.items]),
        )
        timer.daemon = True
        timer.start()
        self._idle_timer = timer

    def _cancel_idle_timer(self):
        with self._lock:
            if self._idle_timer is not None:
                self._idle_timer.cancel()
                self._idle_timer = None

    def _record_abandoned(self, user_id, items):
        try:
            self._process(SnapshotAbandonedCart(user_id=user_id, items=json.dumps(items)))
        except ValidationError as exc:
            logger.warning("Failed to record abandoned cart", user_id=user_id, error=str(exc))
