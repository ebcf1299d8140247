"""Live cart feed — pushes committed cart changes to in-process subscribers.

Every Cart event is routed through ``CartFeedEventHandler``, which notifies
the subscribers registered for that user. Subscribers re-read the cart
themselves; the feed only says *which* cart changed.
"""

import threading
from collections import defaultdict
from collections.abc import Callable

import structlog
from protean.utils.mixins import handle

from ordering.cart.cart import Cart
from ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    GuestCartMerged,
)
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


class CartFeed:
    """Per-user subscriber registry."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Callable[[str], None]]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, user_id: str, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register ``callback`` for changes to ``user_id``'s cart.

        Returns a function that removes the subscription; calling it twice is
        harmless.
        """
        user_id = str(user_id)
        with self._lock:
            self._subscribers[user_id].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(user_id, [])
                if callback in callbacks:
                    callbacks.remove(callback)
                if not callbacks:
                    self._subscribers.pop(user_id, None)

        return unsubscribe

    def subscriber_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(str(user_id), []))

    def publish(self, user_id: str) -> None:
        with self._lock:
            callbacks = list(self._subscribers.get(str(user_id), []))

        for callback in callbacks:
            try:
                callback(str(user_id))
            except Exception:
                # Remaining subscribers are still notified
                logger.exception("Cart feed subscriber failed", user_id=str(user_id))


cart_feed = CartFeed()


@ordering.event_handler(part_of=Cart)
class CartFeedEventHandler:
    """Relays committed Cart changes to the live cart feed."""

    @handle(CartItemAdded)
    def on_item_added(self, event: CartItemAdded) -> None:
        cart_feed.publish(event.user_id)

    @handle(CartQuantityUpdated)
    def on_quantity_updated(self, event: CartQuantityUpdated) -> None:
        cart_feed.publish(event.user_id)

    @handle(CartItemRemoved)
    def on_item_removed(self, event: CartItemRemoved) -> None:
        cart_feed.publish(event.user_id)

    @handle(CartCleared)
    def on_cart_cleared(self, event: CartCleared) -> None:
        cart_feed.publish(event.user_id)

    @handle(GuestCartMerged)
    def on_guest_cart_merged(self, event: GuestCartMerged) -> None:
        cart_feed.publish(event.user_id)
