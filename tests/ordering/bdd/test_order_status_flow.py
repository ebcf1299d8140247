"""BDD tests for order status transitions."""

import json

import pytest
from ordering.cart.items import AddToCart
from ordering.order.checkout import PlaceOrder
from ordering.order.order import Order
from ordering.order.status import UpdateOrderStatus
from ordering.projections.user_orders import UserOrder
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/order_status.feature")

ADDRESS = {
    "full_name": "Rahul Sharma",
    "phone": "9876543210",
    "pincode": "400001",
    "address_line": "12 Marine Drive",
    "city": "Mumbai",
    "state": "Maharashtra",
}


@pytest.fixture()
def placed():
    return {}


@given(parsers.cfparse('"{user_id}" has checked out a cart'))
def checked_out(placed, user_id):
    current_domain.process(
        AddToCart(user_id=user_id, product_id="bat-001", name="SS Platinum", price=45000, quantity=1),
        asynchronous=False,
    )
    placed["order_id"] = current_domain.process(
        PlaceOrder(user_id=user_id, shipping_address=json.dumps(ADDRESS)),
        asynchronous=False,
    )


def _update(placed, error, status, **tracking):
    try:
        current_domain.process(
            UpdateOrderStatus(order_id=placed["order_id"], status=status, **tracking),
            asynchronous=False,
        )
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the order is moved to "{status}"'))
def move_order(placed, error, status):
    _update(placed, error, status)


@when(parsers.cfparse('the order is shipped with "{partner}" and AWB "{awb_id}"'))
def ship_order(placed, error, partner, awb_id):
    _update(placed, error, "shipped", delivery_partner=partner, awb_id=awb_id)


@when(parsers.cfparse('the order is shipped with "{partner}" and no AWB'))
def ship_order_without_awb(placed, error, partner):
    _update(placed, error, "shipped", delivery_partner=partner)


@then(parsers.cfparse("the order and the customer's copy are \"{status}\""))
def both_have_status(placed, status):
    order = current_domain.repository_for(Order).get(placed["order_id"])
    copy = current_domain.repository_for(UserOrder).get(placed["order_id"])
    assert order.status == status
    assert copy.status == status
