"""Shared BDD fixtures for the Ordering domain."""

import pytest
from ordering.cart.cart import Cart
from protean import current_domain
from pytest_bdd import parsers, then


@pytest.fixture()
def error():
    """Container for capturing errors in When steps."""
    return {"exc": None}


@then("the status change is rejected")
def status_change_rejected(error):
    assert error["exc"] is not None


@then(parsers.cfparse('the cart of "{user_id}" holds {quantity:d} of "{product_id}"'))
def cart_holds(user_id, quantity, product_id):
    cart = current_domain.repository_for(Cart).get(user_id)
    assert cart.line_for(product_id).quantity == quantity
