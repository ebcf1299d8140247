"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer

from ordering.domain import ordering


@ordering.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or its quantity incremented."""

    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="Cart")
class CartQuantityUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.event(part_of="Cart")
class CartCleared:
    """Every line was removed, either by the shopper or at checkout."""

    __version__ = 1

    user_id = Identifier(required=True)
    items_removed = Integer(required=True)


@ordering.event(part_of="Cart")
class GuestCartMerged:
    """A guest cart was folded into a signed-in user's cart."""

    __version__ = 1

    user_id = Identifier(required=True)
    items_merged_count = Integer(required=True)
