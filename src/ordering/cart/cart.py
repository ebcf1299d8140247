"""Shopping cart aggregate — one live cart per signed-in user.

The cart id is the user's uid, so a user's cart is always addressable without
a lookup. Lines are keyed by product: adding a product that is already in the
cart increments its quantity. A line never holds a quantity below one; any
change that would take it to zero or less removes the line instead.

Guest carts never reach this aggregate. They live on the client until sign-in
and are then folded in with ``merge_guest_cart``.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    GuestCartMerged,
)
from ordering.domain import ordering


class NotAuthenticated(Exception):
    """A server-side cart operation was attempted without a signed-in user."""


@ordering.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=1024)
    quantity = Integer(required=True, min_value=1)
    updated_at = DateTime()


@ordering.aggregate
class Cart:
    user_id = Identifier(required=True)
    items = HasMany(CartLine)
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        if not user_id:
            raise NotAuthenticated("A cart belongs to a signed-in user")
        return cls(id=str(user_id), user_id=str(user_id), updated_at=datetime.now(UTC))

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------
    @property
    def total(self):
        return sum(line.price * line.quantity for line in self.items)

    @property
    def count(self):
        return sum(line.quantity for line in self.items)

    def line_for(self, product_id):
        return next((line for line in self.items if str(line.product_id) == str(product_id)), None)

    def snapshot(self):
        """Plain-dict copy of the lines, for events, orders and abandoned-cart records."""
        return [
            {
                "product_id": str(line.product_id),
                "name": line.name,
                "price": line.price,
                "image": line.image or "",
                "quantity": line.quantity,
            }
            for line in self.items
        ]

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(self, product_id, price, quantity=1, name=None, image=None):
        """Add a product or increment its quantity; name, price and image given here replace the stored ones."""
        now = datetime.now(UTC)
        existing = self.line_for(product_id)
        previous = existing.quantity if existing else 0
        new_quantity = previous + quantity

        if new_quantity <= 0:
            if existing:
                self.remove_item(product_id)
            return

        if existing:
            existing.quantity = new_quantity
            if name is not None:
                existing.name = name
            existing.price = price
            if image is not None:
                existing.image = image
            existing.updated_at = now
        else:
            self.add_items(
                CartLine(
                    product_id=product_id,
                    name=name,
                    price=price,
                    image=image or "",
                    quantity=new_quantity,
                    updated_at=now,
                )
            )

        self.updated_at = now
        self.raise_(
            CartItemAdded(
                user_id=str(self.user_id),
                product_id=str(product_id),
                quantity=quantity,
                new_quantity=new_quantity,
            )
        )

    def update_item_quantity(self, product_id, quantity):
        """Set a line's quantity. Zero or less removes the line."""
        if quantity <= 0:
            self.remove_item(product_id)
            return

        line = self.line_for(product_id)
        if line is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})

        previous = line.quantity
        now = datetime.now(UTC)
        line.quantity = quantity
        line.updated_at = now
        self.updated_at = now

        self.raise_(
            CartQuantityUpdated(
                user_id=str(self.user_id),
                product_id=str(product_id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        """Delete a line. Removing a product that is not in the cart is a no-op."""
        line = self.line_for(product_id)
        if line is None:
            return False

        self.remove_items(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(user_id=str(self.user_id), product_id=str(product_id)))
        return True

    def clear(self):
        removed = len(self.items)
        for line in list(self.items):
            self.remove_items(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(user_id=str(self.user_id), items_removed=removed))

    # -------------------------------------------------------------------
    # Guest cart merging
    # -------------------------------------------------------------------
    def merge_guest_cart(self, guest_items):
        """Fold guest lines in, adding each guest quantity on top of what the cart holds.

        Args:
            guest_items: List of dicts with product_id, price, quantity and
                optionally name and image.

        There is no idempotency key: merging the same guest list twice counts
        its quantities twice.
        """
        for guest_item in guest_items:
            self.add_item(
                product_id=guest_item["product_id"],
                price=guest_item["price"],
                quantity=guest_item["quantity"],
                name=guest_item.get("name"),
                image=guest_item.get("image"),
            )

        self.raise_(
            GuestCartMerged(
                user_id=str(self.user_id),
                items_merged_count=len(guest_items),
            )
        )
