"""Guest cart merging — command and handler.

On sign-in the client hands over the lines it collected anonymously. Each
guest quantity is added on top of whatever the server cart already holds for
that product.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, NotAuthenticated
from ordering.cart.items import load_cart
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class MergeGuestCart:
    """Merge a guest cart into a signed-in user's cart."""

    user_id = Identifier()
    guest_cart_items = Text(required=True)  # JSON: list of {product_id, name, price, image, quantity}


@ordering.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(MergeGuestCart)
    def merge_guest_cart(self, command):
        if not command.user_id:
            raise NotAuthenticated("Sign in to merge a guest cart")

        guest_items = (
            json.loads(command.guest_cart_items)
            if isinstance(command.guest_cart_items, str)
            else command.guest_cart_items
        )
        if not guest_items:
            return

        cart = load_cart(str(command.user_id), create=True)
        cart.merge_guest_cart(guest_items)
        current_domain.repository_for(Cart).add(cart)

        logger.info(
            "Merged guest cart",
            user_id=str(command.user_id),
            guest_lines=len(guest_items),
            cart_count=cart.count,
        )
