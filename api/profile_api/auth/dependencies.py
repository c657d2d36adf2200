"""Authentication dependencies for FastAPI endpoints."""

from uuid import UUID

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from profile_api.auth.jwt import decode_token
from profile_api.database import get_db
from profile_api.errors import ErrorCode, ProfileAPIError
from profile_api.models.user import User

log = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the owning user from an ``Authorization: Bearer`` header.

    Runs before the request body is read, so an unauthenticated request is
    rejected before any validation or store access.

    Raises:
        ProfileAPIError: AUTH_REQUIRED if the token is missing, invalid,
            expired, not an access token, or names an unknown user
    """
    if credentials is None:
        log.info("auth_rejected", reason="missing_credentials")
        raise ProfileAPIError(ErrorCode.AUTH_REQUIRED)

    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("type") != "access":
        log.info("auth_rejected", reason="invalid_token")
        raise ProfileAPIError(ErrorCode.AUTH_REQUIRED)

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        log.info("auth_rejected", reason="malformed_subject")
        raise ProfileAPIError(ErrorCode.AUTH_REQUIRED) from None

    user = await db.get(User, user_id)
    if user is None:
        log.info("auth_rejected", reason="unknown_user", user_id=str(user_id))
        raise ProfileAPIError(ErrorCode.AUTH_REQUIRED)

    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user
