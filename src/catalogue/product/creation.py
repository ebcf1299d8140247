"""Product creation and bulk catalogue replacement — commands and handler."""

import json

import structlog
from protean import handle
from protean.fields import Float, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from shared.queries import fetch_all

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class AddProduct:
    name: String(required=True, max_length=255)
    subtitle: String(max_length=255)
    description: Text()
    manufacturer: String(max_length=255)
    category: String(required=True, max_length=100)
    price: Float(required=True, min_value=0.0)
    mrp: Float(min_value=0.0)
    images: Text()  # JSON: list of image URLs
    stock: Integer(default=0, min_value=0)
    rating: Float(default=0.0)
    reviews_count: Integer(default=0)
    highlights: Text()  # JSON: list of strings
    specs: Text()  # JSON: {name: value}


@catalogue.command(part_of="Product")
class ReplaceCatalogue:
    """Delete every product and list the given ones instead."""

    products: Text(required=True)  # JSON: list of product dicts


def _loads(value, default):
    if value is None:
        return default
    return json.loads(value) if isinstance(value, str) else value


def _product_from_dict(data):
    # A stored "discount" in seed data is ignored; it is always derived
    return Product.create(
        name=data["name"],
        category=data["category"],
        price=data["price"],
        mrp=data.get("mrp"),
        subtitle=data.get("subtitle"),
        description=data.get("description"),
        manufacturer=data.get("manufacturer"),
        images=data.get("images"),
        stock=data.get("stock", 0),
        rating=data.get("rating", 0.0),
        reviews_count=data.get("reviews_count", data.get("reviewsCount", 0)),
        highlights=data.get("highlights"),
        specs=data.get("specs"),
    )


@catalogue.command_handler(part_of=Product)
class AddProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.create(
            name=command.name,
            category=command.category,
            price=command.price,
            mrp=command.mrp,
            subtitle=command.subtitle,
            description=command.description,
            manufacturer=command.manufacturer,
            images=_loads(command.images, []),
            stock=command.stock,
            rating=command.rating,
            reviews_count=command.reviews_count,
            highlights=_loads(command.highlights, []),
            specs=_loads(command.specs, {}),
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(ReplaceCatalogue)
    def replace_catalogue(self, command):
        repo = current_domain.repository_for(Product)

        existing = fetch_all(repo._dao.query)
        for product in existing:
            repo._dao.delete(product)
        logger.info("Catalogue cleared", removed=len(existing))

        added = []
        for data in _loads(command.products, []):
            product = _product_from_dict(data)
            repo.add(product)
            added.append(str(product.id))

        logger.info("Catalogue replaced", added=len(added))
        return added
