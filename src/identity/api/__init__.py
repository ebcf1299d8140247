"""Identity domain API package."""

from identity.api.routes import admin_router, router

__all__ = ["router", "admin_router"]
