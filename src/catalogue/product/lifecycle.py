"""Product removal — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class RemoveProduct:
    product_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class RemoveProductHandler:
    @handle(RemoveProduct)
    def remove_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)
        logger.info("Product removed", product_id=str(command.product_id), name=product.name)
