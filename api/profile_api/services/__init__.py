"""Services for the Profile API."""

from profile_api.services.profile_fields import insert_values, merge_changes, validate_profile_fields
from profile_api.services.profile_store import ProfileStore

__all__ = ["ProfileStore", "insert_values", "merge_changes", "validate_profile_fields"]
