"""Back-office access control.

The auth service authenticates the caller upstream and forwards its uid in
the ``X-User-Id`` header. Admin routes in every context depend on
``require_admin``, which checks the caller's role in the Identity domain.
"""

import structlog
from fastapi import Header, HTTPException
from protean.exceptions import ObjectNotFoundError

from identity.domain import identity
from identity.user.user import User

logger = structlog.get_logger(__name__)


def load_user(user_id):
    """Fetch a user from the Identity domain regardless of the active context."""
    with identity.domain_context():
        return identity.repository_for(User).get(user_id)


async def require_admin(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Sign in required")

    try:
        user = load_user(x_user_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=401, detail="Unknown user") from None

    if not user.is_admin:
        logger.warning("Admin route refused", user_id=x_user_id, role=user.role)
        raise HTTPException(status_code=403, detail="Admin access required")

    return x_user_id
