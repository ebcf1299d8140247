"""Product aggregate — an item on sale in the storefront.

List-valued attributes (images, highlights) and the specs map are stored as
JSON text, the same way commands and events carry them.
"""

import json
import math
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from catalogue.domain import catalogue

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


def compute_discount(price, mrp):
    """Percentage off the list price, rounded half-up; 0 when there is no markdown."""
    if not mrp or mrp <= price:
        return 0
    return int(math.floor((mrp - price) / mrp * 100 + 0.5))


def _dump_list(values):
    return json.dumps([str(v).strip() for v in (values or []) if str(v).strip()])


def _dump_map(values):
    return json.dumps({str(k).strip(): str(v).strip() for k, v in (values or {}).items() if str(k).strip()})


@catalogue.aggregate
class Product:
    name: String(required=True, max_length=255)
    subtitle: String(max_length=255)
    description: Text()
    manufacturer: String(max_length=255)
    category: String(required=True, max_length=100)
    price: Float(required=True, min_value=0.0)
    mrp: Float(min_value=0.0)
    discount: Integer(default=0)
    images: Text(default="[]")
    stock: Integer(default=0, min_value=0)
    in_stock: Boolean(default=False)
    rating: Float(default=0.0, min_value=0.0, max_value=5.0)
    reviews_count: Integer(default=0, min_value=0)
    highlights: Text(default="[]")
    specs: Text(default="{}")
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def discount_must_match_prices(self):
        if self.discount != compute_discount(self.price, self.mrp):
            raise ValidationError({"discount": ["Discount must be derived from price and MRP"]})

    @invariant.post
    def in_stock_must_follow_stock(self):
        if self.in_stock != (self.stock > 0):
            raise ValidationError({"in_stock": ["In-stock flag must reflect stock level"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        category,
        price,
        mrp=None,
        subtitle=None,
        description=None,
        manufacturer=None,
        images=None,
        stock=0,
        rating=0.0,
        reviews_count=0,
        highlights=None,
        specs=None,
    ):
        from catalogue.product.events import ProductAdded

        mrp = mrp if mrp and mrp > 0 else None
        stock = stock or 0
        now = datetime.now(UTC)
        product = cls(
            name=name,
            subtitle=subtitle,
            description=description,
            manufacturer=manufacturer,
            category=category,
            price=price,
            mrp=mrp,
            discount=compute_discount(price, mrp),
            images=_dump_list(images),
            stock=stock,
            in_stock=stock > 0,
            rating=rating or 0.0,
            reviews_count=reviews_count or 0,
            highlights=_dump_list(highlights),
            specs=_dump_map(specs),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=name,
                category=category,
                price=price,
                mrp=mrp,
                discount=product.discount,
                added_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Accessors for JSON-backed attributes
    # -------------------------------------------------------------------
    @property
    def image_list(self):
        return json.loads(self.images) if self.images else []

    @property
    def highlight_list(self):
        return json.loads(self.highlights) if self.highlights else []

    @property
    def spec_map(self):
        return json.loads(self.specs) if self.specs else {}

    # -------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------
    def update(
        self,
        name=_UNSET,
        subtitle=_UNSET,
        description=_UNSET,
        manufacturer=_UNSET,
        category=_UNSET,
        price=_UNSET,
        mrp=_UNSET,
        images=_UNSET,
        stock=_UNSET,
        rating=_UNSET,
        reviews_count=_UNSET,
        highlights=_UNSET,
        specs=_UNSET,
    ):
        """Apply a partial update. Discount and stock flag are recomputed afterwards."""
        from catalogue.product.events import ProductUpdated

        if price is not _UNSET and price is None:
            raise ValidationError({"price": ["Price cannot be cleared"]})

        scalar_changes = {
            "name": name,
            "subtitle": subtitle,
            "description": description,
            "manufacturer": manufacturer,
            "category": category,
            "price": price,
            "rating": rating,
            "reviews_count": reviews_count,
        }

        with atomic_change(self):
            for field_name, value in scalar_changes.items():
                if value is not _UNSET:
                    setattr(self, field_name, value)

            if mrp is not _UNSET:
                self.mrp = mrp if mrp and mrp > 0 else None
            if stock is not _UNSET:
                self.stock = stock or 0
            if images is not _UNSET:
                self.images = _dump_list(images)
            if highlights is not _UNSET:
                self.highlights = _dump_list(highlights)
            if specs is not _UNSET:
                self.specs = _dump_map(specs)

            self.discount = compute_discount(self.price, self.mrp)
            self.in_stock = self.stock > 0
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                price=self.price,
                mrp=self.mrp,
                discount=self.discount,
                stock=self.stock,
            )
        )
