"""BDD tests for product discount derivation."""

import pytest
from catalogue.product.creation import AddProduct
from catalogue.product.details import UpdateProduct
from catalogue.product.product import Product
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/product_pricing.feature")


@pytest.fixture()
def listing():
    return {}


@given(parsers.cfparse("a product priced {price:d} with an MRP of {mrp:d}"))
def product_listed(listing, price, mrp):
    listing["product_id"] = current_domain.process(
        AddProduct(name="SS Platinum English Willow Bat", category="Cricket Bats", price=price, mrp=mrp),
        asynchronous=False,
    )


@when(parsers.cfparse("the price is changed to {price:d}"))
def price_changed(listing, price):
    current_domain.process(UpdateProduct(product_id=listing["product_id"], price=price), asynchronous=False)


@then(parsers.cfparse("the product shows a discount of {discount:d} percent"))
def discount_shown(listing, discount):
    product = current_domain.repository_for(Product).get(listing["product_id"])
    assert product.discount == discount
