"""Application tests for abandoned cart snapshots and the idle-cart sweep.

Covers:
- Snapshots are upserted per user
- Idle carts with items are recorded by the sweep
- Recently changed and empty carts are left alone
"""

import json
from datetime import UTC, datetime, timedelta

import pytest
from ordering.cart.abandonment import DetectAbandonedCarts, SnapshotAbandonedCart
from ordering.cart.items import AddToCart, RemoveFromCart
from ordering.projections.abandoned_carts import AbandonedCart
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

LINE = {"product_id": "ball-001", "name": "SG Test", "price": 1800, "image": "", "quantity": 2}


def _add(user_id, product_id="ball-001"):
    current_domain.process(
        AddToCart(user_id=user_id, product_id=product_id, name="SG Test", price=1800, quantity=2),
        asynchronous=False,
    )


class TestSnapshotAbandonedCart:
    def test_snapshot_is_keyed_by_user(self):
        current_domain.process(
            SnapshotAbandonedCart(user_id="uid-001", items=json.dumps([LINE])),
            asynchronous=False,
        )

        record = current_domain.repository_for(AbandonedCart).get("uid-001")
        assert record.item_list == [LINE]
        assert record.item_count == 2
        assert record.cart_total == 3600
        assert record.updated_at is not None

    def test_later_snapshot_overwrites(self):
        current_domain.process(
            SnapshotAbandonedCart(user_id="uid-001", items=json.dumps([LINE])),
            asynchronous=False,
        )
        current_domain.process(
            SnapshotAbandonedCart(user_id="uid-001", items=json.dumps([{**LINE, "quantity": 5}])),
            asynchronous=False,
        )

        records = current_domain.repository_for(AbandonedCart)._dao.query.all().items
        assert len(records) == 1
        assert records[0].item_count == 5

    def test_empty_snapshot_rejected(self):
        with pytest.raises(ValidationError):
            current_domain.process(SnapshotAbandonedCart(user_id="uid-001", items="[]"), asynchronous=False)


class TestDetectAbandonedCarts:
    def test_records_idle_cart(self):
        _add("uid-001")

        count = current_domain.process(
            DetectAbandonedCarts(idle_threshold_seconds=120, as_of=datetime.now(UTC) + timedelta(minutes=5)),
            asynchronous=False,
        )

        assert count == 1
        record = current_domain.repository_for(AbandonedCart).get("uid-001")
        assert record.item_list[0]["product_id"] == "ball-001"

    def test_sweep_reaches_every_idle_cart(self):
        for i in range(130):
            _add(f"uid-{i:03d}")

        count = current_domain.process(
            DetectAbandonedCarts(as_of=datetime.now(UTC) + timedelta(minutes=5)),
            asynchronous=False,
        )

        assert count == 130
        current_domain.repository_for(AbandonedCart).get("uid-129")

    def test_recent_cart_is_not_abandoned(self):
        _add("uid-001")

        count = current_domain.process(
            DetectAbandonedCarts(idle_threshold_seconds=120, as_of=datetime.now(UTC)),
            asynchronous=False,
        )

        assert count == 0
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(AbandonedCart).get("uid-001")

    def test_empty_cart_is_not_abandoned(self):
        _add("uid-001")
        current_domain.process(RemoveFromCart(user_id="uid-001", product_id="ball-001"), asynchronous=False)

        count = current_domain.process(
            DetectAbandonedCarts(as_of=datetime.now(UTC) + timedelta(minutes=5)),
            asynchronous=False,
        )
        assert count == 0
