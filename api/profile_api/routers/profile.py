"""Profile router: read, create-or-update and strict update of the caller's profile."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from profile_api.auth.dependencies import get_current_user
from profile_api.config import settings
from profile_api.database import get_db
from profile_api.errors import ErrorCode, ProfileAPIError
from profile_api.middleware.rate_limit import limiter
from profile_api.models.user import User
from profile_api.schemas.profile import (
    FORBIDDEN_IDENTITY_KEYS,
    ErrorResponse,
    ProfileResponse,
    ProfileWriteRequest,
)
from profile_api.services.profile_fields import insert_values, merge_changes, validate_profile_fields
from profile_api.services.profile_store import ProfileStore

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/profile", tags=["Profile"])

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Log store failures in full and surface them as a generic INTERNAL_ERROR."""
    try:
        yield
    except SQLAlchemyError as exc:
        log.error("profile_store_error", operation=operation, error=str(exc), exc_info=True)
        raise ProfileAPIError(ErrorCode.INTERNAL_ERROR) from exc


async def read_profile_payload(request: Request) -> ProfileWriteRequest:
    """
    Parse and validate a profile write body.

    Declared after ``get_current_user`` on every endpoint so the body is
    only read once the caller is authenticated.

    Raises:
        ProfileAPIError: USER_ID_NOT_ALLOWED or the first INVALID_* code
        RequestValidationError: body is not a JSON object of the right shape
    """
    try:
        body = await request.json()
    except ValueError:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": None}]
        ) from None

    if not isinstance(body, dict):
        raise RequestValidationError(
            [{"type": "dict_type", "loc": ("body",), "msg": "Input should be a valid dictionary", "input": body}]
        )

    if any(key in body for key in FORBIDDEN_IDENTITY_KEYS):
        log.warning("profile_identity_override_rejected")
        raise ProfileAPIError(ErrorCode.USER_ID_NOT_ALLOWED)

    try:
        payload = ProfileWriteRequest.model_validate(body)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False), body=body) from None

    validate_profile_fields(payload)
    return payload


@router.get(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def get_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """Get the authenticated user's profile."""
    with store_errors("read"):
        profile = await ProfileStore(db).get(user.id)

    if profile is None:
        raise ProfileAPIError(ErrorCode.PROFILE_NOT_FOUND)

    return ProfileResponse.model_validate(profile)


@router.post(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    responses={status.HTTP_201_CREATED: {"model": ProfileResponse}, **ERROR_RESPONSES},
)
@limiter.limit(settings.profile_write_rate_limit)
async def create_or_update_profile(
    request: Request,
    response: Response,
    user: User = Depends(get_current_user),
    payload: ProfileWriteRequest = Depends(read_profile_payload),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """
    Create the authenticated user's profile, or merge into it if it exists.

    Returns 201 when a row was inserted and 200 when an existing row was
    updated. Only provided fields are merged (see PROFILE_MERGE_STRATEGY).
    """
    changes = merge_changes(payload, settings.profile_merge_strategy)

    with store_errors("create_or_update"):
        profile, created = await ProfileStore(db).create_or_update(
            user.id, insert_values(payload), changes
        )

    if profile is None:
        raise ProfileAPIError(ErrorCode.PROFILE_NOT_FOUND)

    if created:
        response.status_code = status.HTTP_201_CREATED
        log.info("profile_created", profile_id=profile.id)
    else:
        log.info("profile_updated", profile_id=profile.id, fields=sorted(changes))

    return ProfileResponse.model_validate(profile)


@router.put(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
@limiter.limit(settings.profile_write_rate_limit)
async def update_profile(
    request: Request,
    user: User = Depends(get_current_user),
    payload: ProfileWriteRequest = Depends(read_profile_payload),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """
    Update the authenticated user's existing profile.

    Never creates a row: a user without a profile gets 404.
    """
    changes = merge_changes(payload, settings.profile_merge_strategy)

    with store_errors("update"):
        profile = await ProfileStore(db).update(user.id, changes)

    if profile is None:
        raise ProfileAPIError(ErrorCode.PROFILE_NOT_FOUND)

    log.info("profile_updated", profile_id=profile.id, fields=sorted(changes))
    return ProfileResponse.model_validate(profile)
