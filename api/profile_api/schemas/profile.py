"""Profile request/response schemas.

Bodies use camelCase on the wire; snake_case names are accepted too.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

# Body keys that would let a client pick the owning account.
FORBIDDEN_IDENTITY_KEYS = ("userId", "user_id")


class ProfileWriteRequest(BaseModel):
    """
    Body of POST/PUT /api/profile.

    ``age`` is left untyped so that non-integral values reach the age
    validator and come back as INVALID_AGE instead of a schema error.
    Unknown keys are ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    age: Any = None
    date_of_birth: str | None = None
    phone: str | None = None
    country_code: str | None = None
    country: str | None = None
    state: str | None = None
    city: str | None = None


class ProfileResponse(BaseModel):
    """A stored profile row."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    user_id: UUID
    age: int | None
    date_of_birth: str | None
    phone: str | None
    country_code: str | None
    country: str | None
    state: str | None
    city: str | None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        """SQLite hands back naive UTC values; Postgres returns them with an offset."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class ErrorResponse(BaseModel):
    """Error body shared by every failing profile request."""

    error: str
    code: str
    request_id: str | None = None
