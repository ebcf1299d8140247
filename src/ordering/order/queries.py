"""Read-side helpers for order history and the back office."""

import math
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.order.order import Order, OrderStatus
from ordering.projections.user_orders import UserOrder
from shared.queries import fetch_all

HISTORY_PAGE_SIZE = 5
ADMIN_PAGE_SIZE = 10


def _sort_key(record):
    created = record.created_at
    if created is not None and created.tzinfo is not None:
        created = created.astimezone(UTC).replace(tzinfo=None)
    return created or datetime.min


def paginate(records, page, per_page):
    """Slice ``records`` for a 1-based ``page``; returns (page_records, total_pages)."""
    total_pages = max(1, math.ceil(len(records) / per_page))
    page = min(max(1, page), total_pages)
    start = (page - 1) * per_page
    return records[start : start + per_page], total_pages


def order_history(user_id, page=1, per_page=HISTORY_PAGE_SIZE):
    """A user's orders, newest first."""
    records = fetch_all(
        current_domain.repository_for(UserOrder)._dao.query.filter(user_id=str(user_id)),
        order_by="order_id",
    )
    records = sorted(records, key=_sort_key, reverse=True)
    return paginate(records, page, per_page)


def list_orders(status="all", page=1, per_page=ADMIN_PAGE_SIZE):
    """Every order, newest first, optionally narrowed to one status."""
    query = current_domain.repository_for(Order)._dao.query
    if status and status != "all":
        try:
            OrderStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status {status}"]}) from None
        query = query.filter(status=status)
    records = sorted(fetch_all(query), key=_sort_key, reverse=True)
    return paginate(records, page, per_page)


def store_analytics():
    orders = fetch_all(current_domain.repository_for(Order)._dao.query)
    return {
        "order_count": len(orders),
        "revenue": sum(order.total_amount or 0.0 for order in orders),
    }


def customer_stats(user_id):
    """Order count, lifetime spend and the most recent order date for one user."""
    records = fetch_all(
        current_domain.repository_for(UserOrder)._dao.query.filter(user_id=str(user_id)),
        order_by="order_id",
    )
    latest = max(records, key=_sort_key) if records else None
    return {
        "total_orders": len(records),
        "total_spent": sum(record.total_amount or 0.0 for record in records),
        "last_order_at": latest.created_at if latest else None,
    }
