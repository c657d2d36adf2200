"""Database models for the Profile API."""

from profile_api.models.profile import UserProfile
from profile_api.models.user import User

__all__ = [
    "User",
    "UserProfile",
]
