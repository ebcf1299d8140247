"""Abandoned carts — the last known contents of carts left idle while signed in.

One record per user, overwritten by every new snapshot. Remarketing reads
these records; nothing in the storefront deletes them.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering


@ordering.projection
class AbandonedCart:
    user_id = Identifier(identifier=True, required=True)
    items = Text()  # JSON: list of cart line dicts
    item_count = Integer(default=0)
    cart_total = Float(default=0.0)
    updated_at = DateTime()

    @property
    def item_list(self):
        return json.loads(self.items) if self.items else []


def record_snapshot(user_id, items, recorded_at=None):
    """Upsert the snapshot for ``user_id`` and return it."""
    repo = current_domain.repository_for(AbandonedCart)
    recorded_at = recorded_at or datetime.now(UTC)
    item_count = sum(int(item.get("quantity", 0)) for item in items)
    cart_total = sum(float(item.get("price", 0)) * int(item.get("quantity", 0)) for item in items)

    try:
        record = repo.get(str(user_id))
        record.items = json.dumps(items)
        record.item_count = item_count
        record.cart_total = cart_total
        record.updated_at = recorded_at
    except ObjectNotFoundError:
        record = AbandonedCart(
            user_id=str(user_id),
            items=json.dumps(items),
            item_count=item_count,
            cart_total=cart_total,
            updated_at=recorded_at,
        )

    repo.add(record)
    return record
