"""Error taxonomy for the profile endpoints."""

from enum import Enum

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable codes returned in the ``code`` field of error bodies."""

    AUTH_REQUIRED = "AUTH_REQUIRED"
    USER_ID_NOT_ALLOWED = "USER_ID_NOT_ALLOWED"
    INVALID_AGE = "INVALID_AGE"
    INVALID_DATE_OF_BIRTH = "INVALID_DATE_OF_BIRTH"
    INVALID_PHONE = "INVALID_PHONE"
    INVALID_COUNTRY_CODE = "INVALID_COUNTRY_CODE"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# code -> (HTTP status, default message)
ERROR_DEFINITIONS: dict[ErrorCode, tuple[int, str]] = {
    ErrorCode.AUTH_REQUIRED: (status.HTTP_401_UNAUTHORIZED, "Authentication required"),
    ErrorCode.USER_ID_NOT_ALLOWED: (
        status.HTTP_400_BAD_REQUEST,
        "User ID cannot be provided in request body",
    ),
    ErrorCode.INVALID_AGE: (
        status.HTTP_400_BAD_REQUEST,
        "Age must be a positive integer between 1 and 150",
    ),
    ErrorCode.INVALID_DATE_OF_BIRTH: (
        status.HTTP_400_BAD_REQUEST,
        "Date of birth must be a valid ISO date string",
    ),
    ErrorCode.INVALID_PHONE: (status.HTTP_400_BAD_REQUEST, "Phone number format is invalid"),
    ErrorCode.INVALID_COUNTRY_CODE: (
        status.HTTP_400_BAD_REQUEST,
        "Country code must be in format +XX",
    ),
    ErrorCode.PROFILE_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Profile not found"),
    ErrorCode.INTERNAL_ERROR: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
}


class ProfileAPIError(Exception):
    """
    Error raised by dependencies and handlers, rendered by the app-level handler.

    The message is client-facing; internal causes are logged, never attached.
    """

    def __init__(self, code: ErrorCode, message: str | None = None):
        status_code, default_message = ERROR_DEFINITIONS[code]
        self.code = code
        self.status_code = status_code
        self.message = message or default_message
        super().__init__(self.message)
