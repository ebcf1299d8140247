"""HTTP mapping for ordering errors that Protean's handlers do not cover."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ordering.cart.cart import NotAuthenticated

logger = structlog.get_logger(__name__)


async def not_authenticated_handler(request: Request, exc: NotAuthenticated) -> JSONResponse:
    logger.info("Unauthenticated request", path=request.url.path)
    return JSONResponse(status_code=401, content={"error": str(exc) or "Sign in required"})


def register_auth_exception_handler(app: FastAPI) -> None:
    """Answer ``NotAuthenticated`` with 401."""
    app.add_exception_handler(NotAuthenticated, not_authenticated_handler)
