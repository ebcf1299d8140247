"""BDD tests for merging a guest cart on sign-in."""

import pytest
from ordering.cart.items import AddToCart
from ordering.cart.synchronizer import CartSynchronizer, InMemoryGuestCartStore
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/guest_cart_merge.feature")


class _NeverFires:
    def __init__(self, *args, **kwargs):
        self.daemon = False

    def start(self):
        pass

    def cancel(self):
        pass


@pytest.fixture()
def guest_store():
    return InMemoryGuestCartStore()


@pytest.fixture()
def synchronizer(guest_store):
    sync = CartSynchronizer(guest_store, timer_factory=_NeverFires)
    yield sync
    sync.close()


@given(parsers.cfparse('the saved cart of "{user_id}" holds {quantity:d} of "{product_id}"'))
def saved_cart(user_id, quantity, product_id):
    current_domain.process(
        AddToCart(user_id=user_id, product_id=product_id, price=1800, quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('a guest cart holding {quantity:d} of "{product_id}"'))
@given(parsers.cfparse('the guest cart also holds {quantity:d} of "{product_id}"'))
def guest_cart(synchronizer, quantity, product_id):
    synchronizer.add_to_cart({"id": product_id, "name": product_id, "price": 1800}, quantity)


@when(parsers.cfparse('the guest signs in as "{user_id}"'))
def sign_in(synchronizer, user_id):
    synchronizer.sign_in(user_id)


@then("the guest cart is empty")
def guest_cart_empty(guest_store):
    assert guest_store.load() == []
