"""Order aggregate — a placed order and its fulfilment status.

State Machine:
    pending → accepted → shipped → delivered
    pending/accepted → cancelled

``delivered`` and ``cancelled`` are terminal. Moving to ``shipped`` requires
the delivery partner and the AWB (air waybill) tracking id.

Prices, names and images on the items are copied from the cart at checkout
and never change afterwards.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.ACCEPTED, OrderStatus.CANCELLED},
    OrderStatus.ACCEPTED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def allowed_transitions(status):
    """Statuses reachable from ``status`` in one step, as plain strings."""
    return sorted(target.value for target in _VALID_TRANSITIONS[OrderStatus(status)])


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order goes, captured at checkout.

    Later changes to the user's saved address do not touch placed orders.
    """

    full_name = String(required=True, max_length=100)
    phone = String(required=True, max_length=20)
    pincode = String(required=True, max_length=10)
    address_line = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=1024)
    quantity = Integer(required=True, min_value=1)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    shipping_address = ValueObject(ShippingAddress)
    delivery_partner = String(max_length=100)
    awb_id = String(max_length=100)
    shipped_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def shipped_orders_must_carry_tracking(self):
        if self.status == OrderStatus.SHIPPED.value and not (self.delivery_partner and self.awb_id):
            raise ValidationError({"status": ["Shipped orders need a delivery partner and an AWB id"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, items_data, shipping_address):
        """Create a pending order from cart lines.

        Args:
            user_id: The shopper placing the order.
            items_data: List of dicts with product_id, name, price, image, quantity.
            shipping_address: Dict with full_name, phone, pincode,
                address_line, city, state.
        """
        if not items_data:
            raise ValidationError({"items": ["Cannot place an order for an empty cart"]})

        now = datetime.now(UTC)
        order = cls(
            user_id=str(user_id),
            items=[
                OrderItem(
                    product_id=item["product_id"],
                    name=item.get("name"),
                    price=item["price"],
                    image=item.get("image") or "",
                    quantity=item["quantity"],
                )
                for item in items_data
            ],
            total_amount=sum(item["price"] * item["quantity"] for item in items_data),
            status=OrderStatus.PENDING.value,
            shipping_address=ShippingAddress(**shipping_address),
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                item_count=sum(item["quantity"] for item in items_data),
                total_amount=order.total_amount,
                placed_at=now,
            )
        )
        return order

    @property
    def item_list(self):
        return [
            {
                "product_id": str(item.product_id),
                "name": item.name,
                "price": item.price,
                "image": item.image or "",
                "quantity": item.quantity,
            }
            for item in self.items
        ]

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def transition_to(self, status, delivery_partner=None, awb_id=None):
        """Move the order along the status graph.

        A move to ``shipped`` records the delivery partner, AWB id and
        shipping time.
        """
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status {status}"]}) from None

        self._assert_can_transition(target)

        if target == OrderStatus.SHIPPED:
            delivery_partner = (delivery_partner or "").strip()
            awb_id = (awb_id or "").strip()
            if not delivery_partner or not awb_id:
                raise ValidationError({"status": ["Delivery partner and AWB id are required to ship an order"]})

        now = datetime.now(UTC)
        previous = self.status
        with atomic_change(self):
            if target == OrderStatus.SHIPPED:
                self.delivery_partner = delivery_partner
                self.awb_id = awb_id
                self.shipped_at = now
            self.status = target.value
            self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                user_id=str(self.user_id),
                previous_status=previous,
                new_status=target.value,
                delivery_partner=self.delivery_partner,
                awb_id=self.awb_id,
                changed_at=now,
            )
        )
