"""WicketStore FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV selects the config overlay from each domain.toml.
from catalogue.domain import catalogue  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from identity.domain import identity  # noqa: E402
from ordering.domain import ordering  # noqa: E402
from protean.integrations.fastapi import register_exception_handlers

identity.init()
catalogue.init()
ordering.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/users": identity,
    "/admin/users": identity,
    "/products": catalogue,
    "/admin/products": catalogue,
    "/cart": ordering,
    "/orders": ordering,
    "/admin/orders": ordering,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="WicketStore API",
    description="Cricket equipment storefront — Identity, Catalogue & Ordering domains",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # Unmapped paths such as /health and /docs run without a domain context
    return await call_next(request)


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------
from ordering.api.errors import register_auth_exception_handler  # noqa: E402

register_exception_handlers(app)
register_auth_exception_handler(app)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import admin_product_router, product_router  # noqa: E402
from identity.api import admin_router as admin_user_router  # noqa: E402
from identity.api import router as identity_router  # noqa: E402
from ordering.api import admin_order_router, cart_router, order_router  # noqa: E402

app.include_router(identity_router)
app.include_router(admin_user_router)
app.include_router(product_router)
app.include_router(admin_product_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(admin_order_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "identity": {"name": identity.name},
                "catalogue": {"name": catalogue.name},
                "ordering": {"name": ordering.name},
            },
        }
    )
