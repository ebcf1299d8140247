"""Cart line management — commands and handler.

A user's cart is created lazily on the first add, keyed by the user id.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, NotAuthenticated
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class AddToCart:
    user_id = Identifier()
    product_id = Identifier(required=True)
    name = String(max_length=255)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=1024)
    quantity = Integer(default=1)


@ordering.command(part_of="Cart")
class UpdateCartQuantity:
    user_id = Identifier()
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier()
    product_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class ClearCart:
    user_id = Identifier()


def _require_user(command):
    if not command.user_id:
        raise NotAuthenticated("Sign in to use the cart")
    return str(command.user_id)


def load_cart(user_id, create=False):
    """Fetch a user's cart; with ``create`` an empty one is started if none exists."""
    try:
        return current_domain.repository_for(Cart).get(user_id)
    except ObjectNotFoundError:
        if not create:
            raise
        logger.debug("Starting new cart", user_id=user_id)
        return Cart.create(user_id)


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        user_id = _require_user(command)
        cart = load_cart(user_id, create=True)
        cart.add_item(
            product_id=command.product_id,
            price=command.price,
            quantity=command.quantity if command.quantity is not None else 1,
            name=command.name,
            image=command.image,
        )
        current_domain.repository_for(Cart).add(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        user_id = _require_user(command)
        if command.quantity <= 0:
            # Same path as RemoveFromCart, so a missing cart is not an error
            self._remove(user_id, command.product_id)
            return

        cart = load_cart(user_id)
        cart.update_item_quantity(product_id=command.product_id, quantity=command.quantity)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        self._remove(_require_user(command), command.product_id)

    @handle(ClearCart)
    def clear_cart(self, command):
        user_id = _require_user(command)
        try:
            cart = load_cart(user_id)
        except ObjectNotFoundError:
            return
        cart.clear()
        current_domain.repository_for(Cart).add(cart)

    def _remove(self, user_id, product_id):
        try:
            cart = load_cart(user_id)
        except ObjectNotFoundError:
            return
        if cart.remove_item(product_id):
            current_domain.repository_for(Cart).add(cart)
