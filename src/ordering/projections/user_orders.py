"""User orders — the per-user copy of every order, read by order history.

Written in the same unit of work as the canonical Order, both at checkout
and on every status change, so the copy never lags behind.
"""

import json

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.projection
class UserOrder:
    order_id = Identifier(identifier=True, required=True)
    user_id = Identifier(required=True)
    items = Text()  # JSON: list of item dicts
    item_count = Integer(default=0)
    total_amount = Float(default=0.0)
    status = String(max_length=20)
    shipping_address = Text()  # JSON: address dict
    delivery_partner = String(max_length=100)
    awb_id = String(max_length=100)
    shipped_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @property
    def item_list(self):
        return json.loads(self.items) if self.items else []

    @property
    def address(self):
        return json.loads(self.shipping_address) if self.shipping_address else None

    @classmethod
    def copy_of(cls, order):
        return cls(
            order_id=str(order.id),
            user_id=str(order.user_id),
            items=json.dumps(order.item_list),
            item_count=sum(item.quantity for item in order.items),
            total_amount=order.total_amount,
            status=order.status,
            shipping_address=json.dumps(order.shipping_address.to_dict()) if order.shipping_address else None,
            delivery_partner=order.delivery_partner,
            awb_id=order.awb_id,
            shipped_at=order.shipped_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

    def sync_status(self, order):
        self.status = order.status
        self.delivery_partner = order.delivery_partner
        self.awb_id = order.awb_id
        self.shipped_at = order.shipped_at
        self.updated_at = order.updated_at
