"""FastAPI routes for the Ordering domain — cart, checkout and orders.

The caller's uid arrives in the ``X-User-Id`` header. Cart commands raise
``NotAuthenticated`` without it, which the application maps to 401.
"""

import json

from fastapi import APIRouter, Depends, Header, HTTPException
from protean.utils.globals import current_domain

from identity.access import require_admin
from identity.domain import identity
from identity.user.queries import count_users
from ordering.api.schemas import (
    AddToCartRequest,
    AnalyticsResponse,
    CartResponse,
    CheckoutRequest,
    CustomerStatsResponse,
    MergeGuestCartRequest,
    OrderIdResponse,
    OrderPageResponse,
    OrderResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
)
from ordering.cart.cart import NotAuthenticated
from ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity, load_cart
from ordering.cart.management import MergeGuestCart
from ordering.order.checkout import PlaceOrder
from ordering.order.queries import customer_stats, list_orders, order_history, store_analytics
from ordering.order.status import UpdateOrderStatus
from ordering.projections.user_orders import UserOrder

cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
admin_order_router = APIRouter(
    prefix="/admin/orders",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def _iso(value):
    return value.isoformat() if value else None


def _order_response(order) -> OrderResponse:
    """Build a response from either an Order or a UserOrder copy."""
    if isinstance(order, UserOrder):
        order_id, items, address = str(order.order_id), order.item_list, order.address
    else:
        order_id, items = str(order.id), order.item_list
        address = order.shipping_address.to_dict() if order.shipping_address else None

    return OrderResponse(
        order_id=order_id,
        user_id=str(order.user_id),
        items=items,
        total_amount=order.total_amount,
        status=order.status,
        shipping_address=address,
        delivery_partner=order.delivery_partner,
        awb_id=order.awb_id,
        shipped_at=_iso(order.shipped_at),
        created_at=_iso(order.created_at),
    )


def _cart_response(user_id) -> CartResponse:
    cart = load_cart(user_id, create=True)
    return CartResponse(items=cart.snapshot(), total=cart.total, count=cart.count)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
@cart_router.get("", response_model=CartResponse)
async def get_cart(x_user_id: str | None = Header(default=None)) -> CartResponse:
    if not x_user_id:
        raise NotAuthenticated("Sign in to view the cart")
    return _cart_response(x_user_id)


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, x_user_id: str | None = Header(default=None)) -> CartResponse:
    current_domain.process(
        AddToCart(
            user_id=x_user_id,
            product_id=body.product_id,
            name=body.name,
            price=body.price,
            image=body.image,
            quantity=body.quantity,
        ),
        asynchronous=False,
    )
    return _cart_response(x_user_id)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item_quantity(
    product_id: str,
    body: UpdateCartQuantityRequest,
    x_user_id: str | None = Header(default=None),
) -> CartResponse:
    current_domain.process(
        UpdateCartQuantity(user_id=x_user_id, product_id=product_id, quantity=body.quantity),
        asynchronous=False,
    )
    return _cart_response(x_user_id)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, x_user_id: str | None = Header(default=None)) -> CartResponse:
    current_domain.process(RemoveFromCart(user_id=x_user_id, product_id=product_id), asynchronous=False)
    return _cart_response(x_user_id)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(x_user_id: str | None = Header(default=None)) -> CartResponse:
    current_domain.process(ClearCart(user_id=x_user_id), asynchronous=False)
    return _cart_response(x_user_id)


@cart_router.post("/merge", response_model=CartResponse)
async def merge_guest_cart(body: MergeGuestCartRequest, x_user_id: str | None = Header(default=None)) -> CartResponse:
    guest_items = [item.model_dump() for item in body.items]
    current_domain.process(
        MergeGuestCart(user_id=x_user_id, guest_cart_items=json.dumps(guest_items)),
        asynchronous=False,
    )
    return _cart_response(x_user_id)


@cart_router.post("/checkout", status_code=201, response_model=OrderIdResponse)
async def checkout(body: CheckoutRequest, x_user_id: str | None = Header(default=None)) -> OrderIdResponse:
    order_id = current_domain.process(
        PlaceOrder(user_id=x_user_id, shipping_address=json.dumps(body.shipping_address.model_dump())),
        asynchronous=False,
    )
    return OrderIdResponse(order_id=order_id)


# ---------------------------------------------------------------------------
# My orders
# ---------------------------------------------------------------------------
@order_router.get("", response_model=OrderPageResponse)
async def my_orders(page: int = 1, x_user_id: str | None = Header(default=None)) -> OrderPageResponse:
    if not x_user_id:
        raise NotAuthenticated("Sign in to see your orders")
    records, total_pages = order_history(x_user_id, page=page)
    return OrderPageResponse(
        orders=[_order_response(r) for r in records],
        page=max(1, min(page, total_pages)),
        total_pages=total_pages,
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_my_order(order_id: str, x_user_id: str | None = Header(default=None)) -> OrderResponse:
    if not x_user_id:
        raise NotAuthenticated("Sign in to see your orders")
    record = current_domain.repository_for(UserOrder).get(order_id)
    if str(record.user_id) != x_user_id:
        raise HTTPException(status_code=403, detail="Not your order")
    return _order_response(record)


# ---------------------------------------------------------------------------
# Back office
# ---------------------------------------------------------------------------
@admin_order_router.get("", response_model=OrderPageResponse)
async def admin_list_orders(status: str = "all", page: int = 1) -> OrderPageResponse:
    records, total_pages = list_orders(status=status, page=page)
    return OrderPageResponse(
        orders=[_order_response(r) for r in records],
        page=max(1, min(page, total_pages)),
        total_pages=total_pages,
    )


@admin_order_router.get("/analytics", response_model=AnalyticsResponse)
async def analytics() -> AnalyticsResponse:
    stats = store_analytics()
    with identity.domain_context():
        users = count_users()
    return AnalyticsResponse(users=users, orders=stats["order_count"], revenue=stats["revenue"])


@admin_order_router.get("/customers/{user_id}", response_model=CustomerStatsResponse)
async def customer_statistics(user_id: str) -> CustomerStatsResponse:
    stats = customer_stats(user_id)
    return CustomerStatsResponse(
        user_id=user_id,
        total_orders=stats["total_orders"],
        total_spent=stats["total_spent"],
        last_order_at=_iso(stats["last_order_at"]),
    )


@admin_order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    current_domain.process(
        UpdateOrderStatus(
            order_id=order_id,
            status=body.status,
            delivery_partner=body.delivery_partner,
            awb_id=body.awb_id,
        ),
        asynchronous=False,
    )
    return StatusResponse()
