"""Validation and merge rules for profile write payloads."""

from collections.abc import Callable
from typing import Any, Literal

from profile_api.errors import ErrorCode, ProfileAPIError
from profile_api.models.profile import PROFILE_FIELDS
from profile_api.schemas.profile import ProfileWriteRequest
from profile_api.validators import (
    is_valid_age,
    is_valid_country_code,
    is_valid_date_string,
    is_valid_phone_number,
)

MergeStrategy = Literal["truthy", "presence"]

# Checked in this order; the first failure wins.
STRING_FIELD_CHECKS: tuple[tuple[str, Callable[[Any], bool], ErrorCode], ...] = (
    ("date_of_birth", is_valid_date_string, ErrorCode.INVALID_DATE_OF_BIRTH),
    ("phone", is_valid_phone_number, ErrorCode.INVALID_PHONE),
    ("country_code", is_valid_country_code, ErrorCode.INVALID_COUNTRY_CODE),
)


def validate_profile_fields(payload: ProfileWriteRequest) -> None:
    """
    Run every field validator over the provided fields.

    An absent age is skipped, but an explicit null age is checked and fails.
    String fields that are absent, null or empty are skipped.

    Raises:
        ProfileAPIError: the INVALID_* code of the first failing field
    """
    if "age" in payload.model_fields_set and not is_valid_age(payload.age):
        raise ProfileAPIError(ErrorCode.INVALID_AGE)

    for field, check, code in STRING_FIELD_CHECKS:
        value = getattr(payload, field)
        if value and not check(value):
            raise ProfileAPIError(code)


def _stored_value(field: str, value: Any) -> Any:
    if value is None or value == "":
        return None
    if field == "age":
        return int(value)
    return value


def insert_values(payload: ProfileWriteRequest) -> dict[str, Any]:
    """Column values for a brand-new row. Falsy inputs are stored as null."""
    return {
        field: _stored_value(field, getattr(payload, field))
        for field in PROFILE_FIELDS
    }


def merge_changes(payload: ProfileWriteRequest, strategy: MergeStrategy) -> dict[str, Any]:
    """
    Columns to overwrite on an existing row.

    ``truthy`` keeps only truthy incoming values, so ``0`` or ``""`` never
    clears a stored field. ``presence`` writes every field the client sent,
    clearing it when the value is null or empty.
    """
    if strategy == "presence":
        return {
            field: _stored_value(field, getattr(payload, field))
            for field in PROFILE_FIELDS
            if field in payload.model_fields_set
        }

    return {
        field: _stored_value(field, getattr(payload, field))
        for field in PROFILE_FIELDS
        if getattr(payload, field)
    }
