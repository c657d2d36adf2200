"""Async HTTP client for the profile endpoints.

The bearer token is passed to every call rather than read from shared state,
so one client can serve several sessions.
"""

from typing import Any

import httpx
import structlog

log = structlog.get_logger(__name__)

PROFILE_PATH = "/api/profile"
SAVE_FAILED_FALLBACK = "Failed to update profile"


class ProfileClientError(Exception):
    """Error response from the profile API, carrying the server's message."""

    def __init__(self, status_code: int, code: str | None, message: str):
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(message)


class ProfileClient:
    """Thin wrapper around ``httpx.AsyncClient`` for /api/profile."""

    def __init__(
        self,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "ProfileClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @staticmethod
    def _headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _raise_for_error(response: httpx.Response, fallback: str | None = None) -> None:
        if response.is_success:
            return
        try:
            body = response.json()
        except ValueError:
            body = {}
        code = body.get("code") if isinstance(body, dict) else None
        message = body.get("error") if isinstance(body, dict) else None
        if not isinstance(message, str):
            message = fallback or f"Request failed with status {response.status_code}"
        raise ProfileClientError(response.status_code, code, message)

    async def get_profile(self, token: str) -> dict[str, Any] | None:
        """Fetch the caller's profile. Returns None when no profile exists yet."""
        response = await self._http.get(PROFILE_PATH, headers=self._headers(token))
        if response.status_code == httpx.codes.NOT_FOUND:
            log.debug("profile_not_found")
            return None
        self._raise_for_error(response)
        return response.json()

    async def save_profile(self, token: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Create-or-update (POST). Returns the stored row."""
        response = await self._http.post(PROFILE_PATH, json=fields, headers=self._headers(token))
        self._raise_for_error(response, SAVE_FAILED_FALLBACK)
        return response.json()

    async def update_profile(self, token: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Strict update (PUT). Fails with PROFILE_NOT_FOUND if no row exists."""
        response = await self._http.put(PROFILE_PATH, json=fields, headers=self._headers(token))
        self._raise_for_error(response, SAVE_FAILED_FALLBACK)
        return response.json()
