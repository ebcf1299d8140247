"""Order status updates — the back-office command and handler.

The canonical order and its per-user copy change together.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.projections.user_orders import UserOrder

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    delivery_partner = String(max_length=100)
    awb_id = String(max_length=100)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status

        order.transition_to(
            command.status,
            delivery_partner=command.delivery_partner,
            awb_id=command.awb_id,
        )
        repo.add(order)

        copy_repo = current_domain.repository_for(UserOrder)
        try:
            copy = copy_repo.get(str(order.id))
            copy.sync_status(order)
        except ObjectNotFoundError:
            logger.warning("User order copy missing, rebuilding", order_id=str(order.id))
            copy = UserOrder.copy_of(order)
        copy_repo.add(copy)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
        )
