"""Pydantic request/response schemas for the Ordering API.

Request bodies map onto Protean commands in the route handlers; responses
are shaped from aggregates and projections.
"""

from typing import Literal

from pydantic import BaseModel, Field

OrderStatusName = Literal["pending", "accepted", "shipped", "delivered", "cancelled"]


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    full_name: str
    phone: str
    pincode: str = Field(pattern=r"^\d+$")
    address_line: str
    city: str
    state: str


class CartLineSchema(BaseModel):
    product_id: str
    name: str | None = None
    price: float = Field(ge=0)
    image: str | None = None
    quantity: int


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    name: str | None = None
    price: float = Field(ge=0)
    image: str | None = None
    quantity: int = 1

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "ss-ton-platinum",
                    "name": "SS Ton Platinum English Willow Bat",
                    "price": 45000,
                    "image": "https://example.com/bat.jpg",
                    "quantity": 1,
                }
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class MergeGuestCartRequest(BaseModel):
    items: list[CartLineSchema]


class CheckoutRequest(BaseModel):
    shipping_address: AddressSchema


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatusName
    delivery_partner: str | None = None
    awb_id: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartResponse(BaseModel):
    items: list[CartLineSchema]
    total: float
    count: int


class OrderIdResponse(BaseModel):
    order_id: str


class OrderResponse(BaseModel):
    order_id: str
    user_id: str
    items: list[CartLineSchema]
    total_amount: float
    status: str
    shipping_address: AddressSchema | None = None
    delivery_partner: str | None = None
    awb_id: str | None = None
    shipped_at: str | None = None
    created_at: str | None = None


class OrderPageResponse(BaseModel):
    orders: list[OrderResponse]
    page: int
    total_pages: int


class AnalyticsResponse(BaseModel):
    users: int
    orders: int
    revenue: float


class CustomerStatsResponse(BaseModel):
    user_id: str
    total_orders: int
    total_spent: float
    last_order_at: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
