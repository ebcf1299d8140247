"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A cart was checked out into a new pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved the order to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)
    delivery_partner = String(max_length=100)
    awb_id = String(max_length=100)
    changed_at = DateTime(required=True)
