"""Product detail updates — command and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product

# Fields copied verbatim from the command when present
_SCALAR_FIELDS = (
    "name",
    "subtitle",
    "description",
    "manufacturer",
    "category",
    "price",
    "mrp",
    "stock",
    "rating",
    "reviews_count",
)
_JSON_FIELDS = ("images", "highlights", "specs")


@catalogue.command(part_of="Product")
class UpdateProduct:
    """Partial update; omitted fields are left untouched. An MRP of 0 clears it."""

    product_id: Identifier(required=True)
    name: String(max_length=255)
    subtitle: String(max_length=255)
    description: Text()
    manufacturer: String(max_length=255)
    category: String(max_length=100)
    price: Float(min_value=0.0)
    mrp: Float(min_value=0.0)
    images: Text()
    stock: Integer(min_value=0)
    rating: Float()
    reviews_count: Integer()
    highlights: Text()
    specs: Text()


@catalogue.command_handler(part_of=Product)
class UpdateProductHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        changes = {}
        for field_name in _SCALAR_FIELDS:
            value = getattr(command, field_name)
            if value is not None:
                changes[field_name] = value
        for field_name in _JSON_FIELDS:
            value = getattr(command, field_name)
            if value is not None:
                changes[field_name] = json.loads(value) if isinstance(value, str) else value

        product.update(**changes)
        repo.add(product)
