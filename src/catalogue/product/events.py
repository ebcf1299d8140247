"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductAdded:
    """A new product was listed in the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    price: Float(required=True)
    mrp: Float()
    discount: Integer(required=True)
    added_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    price: Float(required=True)
    mrp: Float()
    discount: Integer(required=True)
    stock: Integer(required=True)
