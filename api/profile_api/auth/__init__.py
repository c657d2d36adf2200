"""Authentication utilities for the Profile API."""

from profile_api.auth.dependencies import get_current_user
from profile_api.auth.jwt import create_access_token, decode_token

__all__ = [
    "create_access_token",
    "decode_token",
    "get_current_user",
]
