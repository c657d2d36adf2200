"""
Shared test fixtures for Profile API tests.

Provides database session management, test clients, and user fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from profile_api.auth.jwt import create_access_token
from profile_api.config import settings
from profile_api.database import Base, enable_sqlite_foreign_keys, get_db
from profile_api.main import app
from profile_api.middleware.rate_limit import reset_limiter

# Import models so they're registered with Base.metadata before table creation
from profile_api.models import User, UserProfile  # noqa: F401

# Test database URL (uses separate test database)
TEST_DATABASE_URL = settings.test_database_url

# Create test engine with NullPool to avoid connection issues
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,
    echo=False,
)
enable_sqlite_foreign_keys(test_engine)

TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


# --- Rate Limiter Reset Fixture ---


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Reset rate limiter before each test to ensure test isolation."""
    reset_limiter()
    yield


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create tables before each test function, drop after.
    Provides isolated database state per test.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client configured for testing.
    Overrides database dependency with test session.
    """

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True,
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    """Factory for extra sessions, e.g. to act as a concurrent request."""
    return TestSessionLocal


# --- Authentication Helper Fixtures ---


@pytest.fixture
def auth_headers():
    """Factory fixture for creating bearer Authorization headers."""

    def _auth_headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


# --- User Fixtures ---


async def _create_user(db_session: AsyncSession, email: str, name: str) -> dict[str, Any]:
    """Helper to create a user and mint an access token for it."""
    user = User(email=email, name=name)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)

    return {
        "user_id": str(user.id),
        "email": user.email,
        "token": create_access_token(str(user.id)),
    }


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> dict[str, Any]:
    """Create a standard test user with a valid access token."""
    return await _create_user(db_session, email="test@example.com", name="Test User")


@pytest_asyncio.fixture
async def second_user(db_session: AsyncSession) -> dict[str, Any]:
    """Create a second user for testing ownership scenarios."""
    return await _create_user(db_session, email="second@example.com", name="Second User")


# --- Payload Fixtures ---


@pytest.fixture
def full_profile() -> dict[str, Any]:
    """A profile body with every writable field set to a valid value."""
    return {
        "age": 34,
        "dateOfBirth": "1991-06-15",
        "phone": "+1 (555) 123-4567",
        "countryCode": "+1",
        "country": "United States",
        "state": "Massachusetts",
        "city": "Cambridge",
    }


# --- Utility Fixtures ---


@pytest.fixture
def frozen_time():
    """
    Fixture for time-based testing using freezegun.

    Usage:
        with frozen_time("2026-02-01 12:00:00"):
            # time is frozen
    """
    from functools import partial

    from freezegun import freeze_time

    return partial(freeze_time, real_asyncio=True)
