"""JWT access token creation and validation.

Tokens are minted by the auth provider; the API only verifies them.
``create_access_token`` is kept for the provider side and for tests.
"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from profile_api.config import settings


def create_access_token(user_id: str, expires_minutes: int | None = None) -> str:
    """Create a signed bearer access token for ``user_id``."""
    minutes = settings.access_token_expire_minutes if expires_minutes is None else expires_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    payload = {
        "sub": user_id,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a JWT token.

    Returns the payload if valid, None if invalid or expired.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except jwt.JWTError:
        return None
