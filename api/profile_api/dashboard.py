"""Dashboard form controller.

Holds the editable profile form state and talks to the API through
``ProfileClient``. Rendering is left to the caller, which reads ``data``,
``notifications`` and ``redirect_to`` after each action.
"""

from dataclasses import dataclass
from typing import Any, Literal

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from profile_api.client import ProfileClient, ProfileClientError

log = structlog.get_logger(__name__)

LOGIN_PATH = "/login"
SAVE_SUCCESS_MESSAGE = "Profile updated successfully!"
SAVE_FAILED_MESSAGE = "An error occurred while updating profile"


class ProfileFormData(BaseModel):
    """Editable form fields. Empty text inputs are empty strings, not None."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    age: int | None = None
    date_of_birth: str = ""
    phone: str = ""
    country_code: str = ""
    country: str = ""
    state: str = ""
    city: str = ""

    @field_validator("age", mode="before")
    @classmethod
    def blank_age_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_profile(cls, profile: dict[str, Any]) -> "ProfileFormData":
        """Build form state from a profile response body."""
        return cls(
            age=profile.get("age") or None,
            date_of_birth=profile.get("dateOfBirth") or "",
            phone=profile.get("phone") or "",
            country_code=profile.get("countryCode") or "",
            country=profile.get("country") or "",
            state=profile.get("state") or "",
            city=profile.get("city") or "",
        )

    def to_payload(self) -> dict[str, Any]:
        """Request body for a save: every field, with empty ones left out."""
        return {
            key: value
            for key, value in self.model_dump(by_alias=True).items()
            if value not in (None, "")
        }


@dataclass
class Notification:
    """A transient message shown to the user."""

    level: Literal["success", "error"]
    message: str


class DashboardForm:
    """Load, edit and save the signed-in user's profile."""

    def __init__(self, client: ProfileClient, token: str | None):
        self.client = client
        self.token = token
        self.data = ProfileFormData()
        self.has_profile = False
        self.redirect_to: str | None = None
        self.notifications: list[Notification] = []

    async def mount(self) -> None:
        """Redirect away without a session, otherwise load the profile."""
        if not self.token:
            self.redirect_to = LOGIN_PATH
            return
        await self.refresh()

    async def refresh(self) -> bool:
        """
        Re-fetch the profile into the form.

        A missing profile is not an error: the form stays empty so the user
        can create one. Other failures are logged and leave the form as is.
        """
        try:
            profile = await self.client.get_profile(self.token)
        except (ProfileClientError, httpx.HTTPError) as exc:
            log.warning("profile_fetch_failed", error=str(exc))
            return False

        if profile is None:
            log.info("profile_not_found_starting_empty")
            self.has_profile = False
            return True

        self.data = ProfileFormData.from_profile(profile)
        self.has_profile = True
        return True

    def edit(self, **changes: Any) -> None:
        """Apply user input to the form, coercing values like ``age="42"``."""
        self.data = ProfileFormData.model_validate({**self.data.model_dump(), **changes})

    async def submit(self) -> bool:
        """Send the form to the create-or-update endpoint, then re-fetch."""
        if not self.token:
            self.redirect_to = LOGIN_PATH
            return False

        try:
            await self.client.save_profile(self.token, self.data.to_payload())
        except ProfileClientError as exc:
            self.notifications.append(Notification("error", exc.message))
            return False
        except httpx.HTTPError as exc:
            log.warning("profile_save_failed", error=str(exc))
            self.notifications.append(Notification("error", SAVE_FAILED_MESSAGE))
            return False

        self.notifications.append(Notification("success", SAVE_SUCCESS_MESSAGE))
        await self.refresh()
        return True
