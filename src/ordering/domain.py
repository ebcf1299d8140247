"""Ordering bounded context — shopping carts, checkout and orders.

Handles the per-user cart (with guest cart merging and abandoned-cart
snapshots), the checkout that turns a cart into an order, and the admin
status transitions that an order goes through afterwards.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
