"""Pydantic request/response schemas for the Catalogue API."""

from typing import Literal

from pydantic import BaseModel, Field

SortOption = Literal["name", "price-low", "price-high", "rating"]


# ---------------------------------------------------------------------------
# Product Request Schemas
# ---------------------------------------------------------------------------
class AddProductRequest(BaseModel):
    name: str = Field(..., max_length=255)
    subtitle: str | None = Field(None, max_length=255)
    description: str | None = None
    manufacturer: str | None = Field(None, max_length=255)
    category: str = Field(..., max_length=100)
    price: float = Field(..., ge=0)
    mrp: float | None = Field(None, ge=0)
    images: list[str] = Field(default_factory=list)
    stock: int = Field(0, ge=0)
    rating: float = Field(0.0, ge=0, le=5)
    reviews_count: int = Field(0, ge=0)
    highlights: list[str] = Field(default_factory=list)
    specs: dict[str, str] = Field(default_factory=dict)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "SS Platinum English Willow Bat",
                    "manufacturer": "SS Cricket, India",
                    "category": "Cricket Bats",
                    "price": 45000,
                    "mrp": 52000,
                    "stock": 5,
                    "highlights": ["Grade 1+ Willow"],
                    "specs": {"Weight": "1160g"},
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    subtitle: str | None = Field(None, max_length=255)
    description: str | None = None
    manufacturer: str | None = Field(None, max_length=255)
    category: str | None = Field(None, max_length=100)
    price: float | None = Field(None, ge=0)
    mrp: float | None = Field(None, ge=0)
    images: list[str] | None = None
    stock: int | None = Field(None, ge=0)
    rating: float | None = Field(None, ge=0, le=5)
    reviews_count: int | None = Field(None, ge=0)
    highlights: list[str] | None = None
    specs: dict[str, str] | None = None


class SubmitReviewRequest(BaseModel):
    rating: int = Field(5, ge=1, le=5)
    comment: str = Field(..., min_length=1)
    user_name: str | None = Field(None, max_length=254)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    product_id: str
    name: str
    subtitle: str | None = None
    description: str | None = None
    manufacturer: str | None = None
    category: str
    price: float
    mrp: float | None = None
    discount: int
    images: list[str]
    stock: int
    in_stock: bool
    rating: float
    reviews_count: int
    highlights: list[str]
    specs: dict[str, str]


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    total: int


class ReviewIdResponse(BaseModel):
    review_id: str


class ReviewResponse(BaseModel):
    review_id: str
    user_id: str
    user_name: str | None = None
    rating: int
    comment: str
    created_at: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
