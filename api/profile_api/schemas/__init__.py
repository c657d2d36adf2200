"""Pydantic schemas for request/response validation."""

from profile_api.schemas.profile import (
    FORBIDDEN_IDENTITY_KEYS,
    ErrorResponse,
    ProfileResponse,
    ProfileWriteRequest,
)

__all__ = [
    "FORBIDDEN_IDENTITY_KEYS",
    "ErrorResponse",
    "ProfileResponse",
    "ProfileWriteRequest",
]
