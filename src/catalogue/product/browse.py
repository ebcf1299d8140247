"""Storefront browsing — filter and sort the product list.

The catalogue is small enough that every browse is a linear scan over the
repository followed by an in-memory sort.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from catalogue.product.product import Product
from shared.queries import fetch_all

SORT_OPTIONS = ("name", "price-low", "price-high", "rating")

DEFAULT_PRICE_RANGE = (0.0, 100000.0)


@dataclass
class ProductFilters:
    category: str = "all"
    manufacturer: str = "all"
    min_price: float = DEFAULT_PRICE_RANGE[0]
    max_price: float = DEFAULT_PRICE_RANGE[1]
    min_rating: float = 0
    in_stock: bool = False
    sort_by: str = "name"

    def matches(self, product) -> bool:
        if self.category != "all" and product.category != self.category:
            return False
        if self.manufacturer != "all" and product.manufacturer != self.manufacturer:
            return False
        if not (self.min_price <= product.price <= self.max_price):
            return False
        if self.min_rating > 0 and (product.rating or 0) < self.min_rating:
            return False
        if self.in_stock and not product.in_stock:
            return False
        return True


def _sort_key(sort_by):
    if sort_by == "price-low":
        return lambda p: p.price, False
    if sort_by == "price-high":
        return lambda p: p.price, True
    if sort_by == "rating":
        return lambda p: p.rating or 0, True
    return lambda p: (p.name or "").casefold(), False


def filter_products(products, filters: ProductFilters):
    """Apply filters and ordering to an iterable of products."""
    if filters.sort_by not in SORT_OPTIONS:
        raise ValueError(f"Unknown sort option: {filters.sort_by}")

    selected = [p for p in products if filters.matches(p)]
    key, reverse = _sort_key(filters.sort_by)
    return sorted(selected, key=key, reverse=reverse)


def browse_products(filters: ProductFilters | None = None):
    products = fetch_all(current_domain.repository_for(Product)._dao.query)
    return filter_products(products, filters or ProductFilters())


def list_manufacturers():
    """Distinct manufacturer names, for the brand filter dropdown."""
    products = fetch_all(current_domain.repository_for(Product)._dao.query)
    return sorted({p.manufacturer for p in products if p.manufacturer})
