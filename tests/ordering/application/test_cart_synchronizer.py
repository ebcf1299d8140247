"""Application tests for the cart synchronizer.

Covers:
- Guest carts live in the guest store
- Sign-in merges the guest cart and empties the store
- Signed-in views follow server changes made elsewhere
- The idle timer is re-armed on every change and cancelled for empty carts
"""

import json

import pytest
from ordering.cart.abandonment import ABANDONED_CART_IDLE_SECONDS
from ordering.cart.cart import Cart
from ordering.cart.feed import cart_feed
from ordering.cart.items import AddToCart
from ordering.cart.synchronizer import (
    CartSynchronizer,
    InMemoryGuestCartStore,
    JsonFileGuestCartStore,
    line_from_product,
)
from ordering.projections.abandoned_carts import AbandonedCart
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

BAT = {
    "id": "bat-001",
    "name": "SS Platinum English Willow Bat",
    "price": 45000,
    "images": ["https://example.com/bat.jpg"],
}
BALL = {
    "id": "ball-001",
    "name": "SG Test White Cricket Ball",
    "price": 1800,
    "image": "https://example.com/ball.jpg",
}


class FakeTimer:
    """Stands in for threading.Timer; fires only when the test says so."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args, **self.kwargs)


@pytest.fixture()
def timers():
    return []


@pytest.fixture()
def guest_store():
    return InMemoryGuestCartStore()


@pytest.fixture()
def make_sync(timers, guest_store):
    created = []

    def factory(store=None):
        def timer_factory(*args, **kwargs):
            timer = FakeTimer(*args, **kwargs)
            timers.append(timer)
            return timer

        sync = CartSynchronizer(store or guest_store, timer_factory=timer_factory)
        created.append(sync)
        return sync

    yield factory

    for sync in created:
        sync.close()


def _live(timers):
    return [t for t in timers if t.started and not t.cancelled]


class TestLineFromProduct:
    def test_falls_back_to_first_image(self):
        line = line_from_product(BAT, quantity=2)
        assert line == {
            "product_id": "bat-001",
            "name": BAT["name"],
            "price": 45000,
            "image": "https://example.com/bat.jpg",
            "quantity": 2,
        }

    def test_prefers_single_image(self):
        assert line_from_product(BALL)["image"] == "https://example.com/ball.jpg"


class TestGuestCart:
    def test_guest_lines_are_stored_locally(self, make_sync, guest_store):
        sync = make_sync()
        sync.add_to_cart(BALL, 2)
        sync.add_to_cart(BALL, 1)
        sync.add_to_cart(BAT)

        assert sync.count == 4
        assert sync.total == 3 * 1800 + 45000
        assert [item["quantity"] for item in guest_store.load()] == [3, 1]

    def test_update_to_zero_removes(self, make_sync, guest_store):
        sync = make_sync()
        sync.add_to_cart(BALL, 2)
        sync.update_quantity("ball-001", 0)

        assert sync.items == []
        assert guest_store.load() == []

    def test_no_idle_timer_for_guests(self, make_sync, timers):
        sync = make_sync()
        sync.add_to_cart(BALL)
        assert timers == []

    def test_view_starts_from_stored_guest_cart(self, make_sync):
        store = InMemoryGuestCartStore([line_from_product(BALL, 2)])
        sync = make_sync(store)
        assert sync.count == 2


class TestSignIn:
    def test_guest_cart_merged_into_server_cart(self, make_sync, guest_store):
        current_domain.process(
            AddToCart(user_id="uid-001", product_id="ball-001", name=BALL["name"], price=1800, quantity=1),
            asynchronous=False,
        )
        sync = make_sync()
        sync.add_to_cart(BALL, 2)
        sync.add_to_cart(BAT, 1)

        sync.sign_in("uid-001")

        cart = current_domain.repository_for(Cart).get("uid-001")
        assert cart.line_for("ball-001").quantity == 3
        assert cart.line_for("bat-001").quantity == 1
        assert guest_store.load() == []
        assert sync.count == 4

    def test_sign_in_with_empty_guest_cart_creates_nothing(self, make_sync):
        sync = make_sync()
        sync.sign_in("uid-001")

        assert sync.items == []
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Cart).get("uid-001")

    def test_signed_in_changes_go_to_the_server(self, make_sync, guest_store):
        sync = make_sync()
        sync.sign_in("uid-001")
        sync.add_to_cart(BAT)
        sync.add_to_cart(BALL, 6)
        sync.update_quantity("ball-001", 4)
        sync.remove_from_cart("bat-001")

        cart = current_domain.repository_for(Cart).get("uid-001")
        assert cart.count == 4
        assert sync.count == 4
        assert guest_store.load() == []


class TestLiveMirror:
    def test_changes_from_another_device_are_mirrored(self, make_sync):
        phone = make_sync(InMemoryGuestCartStore())
        laptop = make_sync(InMemoryGuestCartStore())
        phone.sign_in("uid-001")
        laptop.sign_in("uid-001")

        phone.add_to_cart(BAT)

        assert laptop.count == 1
        assert laptop.items[0]["product_id"] == "bat-001"

    def test_api_changes_are_mirrored(self, make_sync):
        sync = make_sync()
        sync.sign_in("uid-001")

        current_domain.process(
            AddToCart(user_id="uid-001", product_id="ball-001", price=1800, quantity=2),
            asynchronous=False,
        )

        assert sync.count == 2


class TestSignOut:
    def test_sign_out_falls_back_to_guest_store(self, make_sync, timers):
        sync = make_sync()
        sync.sign_in("uid-001")
        sync.add_to_cart(BAT)

        sync.sign_out()

        assert sync.user_id is None
        assert sync.items == []
        assert cart_feed.subscriber_count("uid-001") == 0
        assert _live(timers) == []


class TestIdleTimer:
    def test_timer_armed_with_idle_window(self, make_sync, timers):
        sync = make_sync()
        sync.sign_in("uid-001")
        sync.add_to_cart(BAT)

        live = _live(timers)
        assert len(live) == 1
        assert live[0].interval == ABANDONED_CART_IDLE_SECONDS
        assert live[0].daemon is True

    def test_every_change_rearms_the_timer(self, make_sync, timers):
        sync = make_sync()
        sync.sign_in("uid-001")
        sync.add_to_cart(BAT)
        first = _live(timers)[0]

        sync.add_to_cart(BALL)

        assert first.cancelled
        assert len(_live(timers)) == 1

    def test_emptying_the_cart_cancels_the_timer(self, make_sync, timers):
        sync = make_sync()
        sync.sign_in("uid-001")
        sync.add_to_cart(BAT)
        sync.remove_from_cart("bat-001")

        assert _live(timers) == []

    def test_firing_records_the_abandoned_cart(self, make_sync, timers):
        sync = make_sync()
        sync.sign_in("uid-001")
        sync.add_to_cart(BAT)
        sync.add_to_cart(BALL, 2)

        _live(timers)[0].fire()

        record = current_domain.repository_for(AbandonedCart).get("uid-001")
        assert record.item_count == 3
        assert {item["product_id"] for item in record.item_list} == {"bat-001", "ball-001"}


class TestJsonFileGuestCartStore:
    def test_round_trip_and_clear(self, tmp_path):
        store = JsonFileGuestCartStore(tmp_path / "guest" / "cart.json")
        assert store.load() == []

        store.save([line_from_product(BALL, 2)])
        assert json.loads((tmp_path / "guest" / "cart.json").read_text())[0]["quantity"] == 2
        assert store.load()[0]["product_id"] == "ball-001"

        store.clear()
        assert store.load() == []

    def test_unreadable_file_is_treated_as_empty(self, tmp_path):
        path = tmp_path / "cart.json"
        path.write_text("{not json")
        assert JsonFileGuestCartStore(path).load() == []
