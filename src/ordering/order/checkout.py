"""Checkout — turn the user's cart into a pending order.

The order, its per-user copy and the emptied cart are saved in one unit of
work: either all three land or none do.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, NotAuthenticated
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.projections.user_orders import UserOrder

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier()
    shipping_address = Text(required=True)  # JSON: address dict


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        if not command.user_id:
            raise NotAuthenticated("Sign in to place an order")

        cart_repo = current_domain.repository_for(Cart)
        try:
            cart = cart_repo.get(str(command.user_id))
        except ObjectNotFoundError:
            cart = None
        if cart is None or not cart.items:
            raise ValidationError({"cart": ["Your cart is empty"]})

        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )

        order = Order.place(
            user_id=command.user_id,
            items_data=cart.snapshot(),
            shipping_address=shipping_address,
        )
        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(UserOrder).add(UserOrder.copy_of(order))

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(command.user_id),
            total_amount=order.total_amount,
        )
        return str(order.id)
