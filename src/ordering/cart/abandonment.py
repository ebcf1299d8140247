"""Abandoned cart capture — snapshot and sweep commands.

``SnapshotAbandonedCart`` is sent by a cart synchronizer once its idle timer
fires. ``DetectAbandonedCarts`` does the same job server-side for clients
that went away before their timer could fire; it is meant to be triggered
periodically by an external scheduler.
"""

import json
from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.projections.abandoned_carts import record_snapshot
from shared.queries import fetch_all

logger = structlog.get_logger(__name__)

ABANDONED_CART_IDLE_SECONDS = 120


def _naive_utc(value):
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


@ordering.command(part_of="Cart")
class SnapshotAbandonedCart:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of cart line dicts


@ordering.command(part_of="Cart")
class DetectAbandonedCarts:
    """Snapshot every non-empty cart idle beyond the threshold."""

    idle_threshold_seconds = Integer(default=ABANDONED_CART_IDLE_SECONDS, min_value=1)
    as_of = DateTime()  # Optional: defaults to now


@ordering.command_handler(part_of=Cart)
class AbandonedCartHandler:
    @handle(SnapshotAbandonedCart)
    def snapshot_abandoned_cart(self, command):
        items = json.loads(command.items) if isinstance(command.items, str) else command.items
        if not items:
            raise ValidationError({"items": ["An empty cart cannot be abandoned"]})

        record_snapshot(str(command.user_id), items)
        logger.info(
            "Recorded abandoned cart",
            user_id=str(command.user_id),
            line_count=len(items),
        )

    @handle(DetectAbandonedCarts)
    def detect_abandoned_carts(self, command):
        as_of = command.as_of or datetime.now(UTC)
        threshold = command.idle_threshold_seconds or ABANDONED_CART_IDLE_SECONDS
        cutoff = _naive_utc(as_of - timedelta(seconds=threshold))

        logger.info(
            "Checking for abandoned carts",
            cutoff=cutoff.isoformat(),
            threshold_seconds=threshold,
        )

        carts = fetch_all(current_domain.repository_for(Cart)._dao.query)

        recorded = 0
        for cart in carts:
            if not cart.items or not cart.updated_at:
                continue
            if _naive_utc(cart.updated_at) > cutoff:
                continue

            record_snapshot(str(cart.user_id), cart.snapshot(), recorded_at=as_of)
            recorded += 1
            logger.info(
                "Recorded abandoned cart",
                user_id=str(cart.user_id),
                item_count=cart.count,
                last_updated=str(cart.updated_at),
            )

        logger.info("Cart abandonment detection complete", recorded_count=recorded)
        return recorded
