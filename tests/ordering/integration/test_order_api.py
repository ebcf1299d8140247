"""Integration tests for the back-office Order API endpoints via TestClient."""

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from identity.access import require_admin
from identity.domain import identity
from identity.user.registration import RegisterUser
from ordering.api import admin_order_router
from ordering.cart.items import AddToCart
from ordering.order.checkout import PlaceOrder
from ordering.projections.user_orders import UserOrder
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers

ADDRESS = {
    "full_name": "Rahul Sharma",
    "phone": "9876543210",
    "pincode": "400001",
    "address_line": "12 Marine Drive",
    "city": "Mumbai",
    "state": "Maharashtra",
}


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(admin_order_router)
    app.dependency_overrides[require_admin] = lambda: "uid-admin"
    return TestClient(app)


def _place_order(user_id="uid-001", price=45000):
    current_domain.process(
        AddToCart(user_id=user_id, product_id="bat-001", name="SS Platinum", price=price, quantity=1),
        asynchronous=False,
    )
    return current_domain.process(
        PlaceOrder(user_id=user_id, shipping_address=json.dumps(ADDRESS)),
        asynchronous=False,
    )


class TestAdminOrderEndpoints:
    def test_list_with_status_filter(self, client):
        first = _place_order()
        _place_order()
        client.put(f"/admin/orders/{first}/status", json={"status": "accepted"})

        accepted = client.get("/admin/orders", params={"status": "accepted"}).json()
        assert [o["order_id"] for o in accepted["orders"]] == [first]

        everything = client.get("/admin/orders").json()
        assert len(everything["orders"]) == 2

    def test_ship_with_tracking(self, client):
        order_id = _place_order()
        client.put(f"/admin/orders/{order_id}/status", json={"status": "accepted"})
        response = client.put(
            f"/admin/orders/{order_id}/status",
            json={"status": "shipped", "delivery_partner": "BlueDart", "awb_id": "AWB123"},
        )
        assert response.status_code == 200

        copy = current_domain.repository_for(UserOrder).get(order_id)
        assert copy.status == "shipped"
        assert copy.awb_id == "AWB123"

    def test_ship_without_tracking_is_a_bad_request(self, client):
        order_id = _place_order()
        client.put(f"/admin/orders/{order_id}/status", json={"status": "accepted"})
        response = client.put(f"/admin/orders/{order_id}/status", json={"status": "shipped"})
        assert response.status_code == 400

    def test_unknown_status_fails_validation(self, client):
        order_id = _place_order()
        response = client.put(f"/admin/orders/{order_id}/status", json={"status": "lost"})
        assert response.status_code == 422

    def test_analytics(self, client):
        with identity.domain_context():
            current_domain.process(RegisterUser(user_id="uid-001", email="rahul@example.com"), asynchronous=False)
            current_domain.process(RegisterUser(user_id="uid-002", email="anil@example.com"), asynchronous=False)
        _place_order(price=45000)
        _place_order(user_id="uid-002", price=1800)

        body = client.get("/admin/orders/analytics").json()
        assert body == {"users": 2, "orders": 2, "revenue": 46800.0}

    def test_customer_stats(self, client):
        _place_order(price=45000)
        _place_order(price=1800)

        body = client.get("/admin/orders/customers/uid-001").json()
        assert body["total_orders"] == 2
        assert body["total_spent"] == 46800.0
        assert body["last_order_at"] is not None

    def test_admin_routes_require_admin(self):
        app = FastAPI()
        app.include_router(admin_order_router)
        assert TestClient(app).get("/admin/orders").status_code == 401
