"""FastAPI routes for the Catalogue domain — storefront browsing and product admin."""

import json

from fastapi import APIRouter, Depends, Header, HTTPException
from protean.utils.globals import current_domain

from catalogue.api.schemas import (
    AddProductRequest,
    ProductIdResponse,
    ProductListResponse,
    ProductResponse,
    ReviewIdResponse,
    ReviewResponse,
    SortOption,
    StatusResponse,
    SubmitReviewRequest,
    UpdateProductRequest,
)
from catalogue.product.browse import ProductFilters, browse_products
from catalogue.product.creation import AddProduct
from catalogue.product.details import UpdateProduct
from catalogue.product.lifecycle import RemoveProduct
from catalogue.product.product import Product
from catalogue.review.submission import SubmitReview, reviews_for
from identity.access import require_admin

product_router = APIRouter(prefix="/products", tags=["products"])
admin_product_router = APIRouter(
    prefix="/admin/products",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        subtitle=product.subtitle,
        description=product.description,
        manufacturer=product.manufacturer,
        category=product.category,
        price=product.price,
        mrp=product.mrp,
        discount=product.discount,
        images=product.image_list,
        stock=product.stock,
        in_stock=product.in_stock,
        rating=product.rating or 0.0,
        reviews_count=product.reviews_count or 0,
        highlights=product.highlight_list,
        specs=product.spec_map,
    )


# ---------------------------------------------------------------------------
# Storefront
# ---------------------------------------------------------------------------
@product_router.get("", response_model=ProductListResponse)
async def list_products(
    category: str = "all",
    manufacturer: str = "all",
    min_price: float = 0,
    max_price: float = 100000,
    min_rating: float = 0,
    in_stock: bool = False,
    sort_by: SortOption = "name",
) -> ProductListResponse:
    filters = ProductFilters(
        category=category,
        manufacturer=manufacturer,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        in_stock=in_stock,
        sort_by=sort_by,
    )
    products = [_product_response(p) for p in browse_products(filters)]
    return ProductListResponse(products=products, total=len(products))


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    return _product_response(product)


@product_router.get("/{product_id}/reviews", response_model=list[ReviewResponse])
async def list_reviews(product_id: str) -> list[ReviewResponse]:
    return [
        ReviewResponse(
            review_id=str(r.id),
            user_id=str(r.user_id),
            user_name=r.user_name,
            rating=r.rating,
            comment=r.comment,
            created_at=r.created_at.isoformat() if r.created_at else None,
        )
        for r in reviews_for(product_id)
    ]


@product_router.post("/{product_id}/reviews", status_code=201, response_model=ReviewIdResponse)
async def submit_review(
    product_id: str,
    body: SubmitReviewRequest,
    x_user_id: str | None = Header(default=None),
) -> ReviewIdResponse:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Sign in to review products")
    command = SubmitReview(
        product_id=product_id,
        user_id=x_user_id,
        user_name=body.user_name,
        rating=body.rating,
        comment=body.comment,
    )
    review_id = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=review_id)


# ---------------------------------------------------------------------------
# Back office
# ---------------------------------------------------------------------------
@admin_product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        subtitle=body.subtitle,
        description=body.description,
        manufacturer=body.manufacturer,
        category=body.category,
        price=body.price,
        mrp=body.mrp,
        images=json.dumps(body.images),
        stock=body.stock,
        rating=body.rating,
        reviews_count=body.reviews_count,
        highlights=json.dumps(body.highlights),
        specs=json.dumps(body.specs),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=product_id)


@admin_product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    changes = body.model_dump(exclude_none=True)
    for field_name in ("images", "highlights", "specs"):
        if field_name in changes:
            changes[field_name] = json.dumps(changes[field_name])

    current_domain.process(UpdateProduct(product_id=product_id, **changes), asynchronous=False)
    return StatusResponse()


@admin_product_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_product(product_id: str) -> StatusResponse:
    current_domain.process(RemoveProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()
