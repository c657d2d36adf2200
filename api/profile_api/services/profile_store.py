"""Profile store: reads and atomic writes against ``user_profiles``."""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from profile_api.models.profile import UserProfile

# Refresh rows already held in the session's identity map from RETURNING data.
REFRESH_OPTIONS = {"populate_existing": True}


def _dialect_insert(db: AsyncSession):
    """Pick the dialect-specific INSERT that supports ON CONFLICT."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise RuntimeError(f"Profile upsert is not supported on dialect {dialect!r}")


class ProfileStore:
    """CRUD for the single profile row owned by a user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile row, if one exists."""
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.user_id == user_id).limit(1),
            execution_options=REFRESH_OPTIONS,
        )
        return result.scalar_one_or_none()

    async def create_or_update(
        self,
        user_id: UUID,
        values: dict[str, Any],
        changes: dict[str, Any],
    ) -> tuple[UserProfile | None, bool]:
        """
        Insert a profile with ``values`` or merge ``changes`` into the existing one.

        The insert is ``ON CONFLICT (user_id) DO NOTHING``, so two concurrent
        first writes cannot produce two rows or a constraint error: the loser
        falls through to the update.

        Returns:
            Tuple of (profile, created). profile is None only if the row
            disappeared between the two statements.
        """
        now = datetime.now(timezone.utc)
        insert = _dialect_insert(self.db)
        stmt = (
            insert(UserProfile)
            .values(user_id=user_id, created_at=now, updated_at=now, **values)
            .on_conflict_do_nothing(index_elements=["user_id"])
            .returning(UserProfile)
        )
        result = await self.db.execute(stmt, execution_options=REFRESH_OPTIONS)
        profile = result.scalar_one_or_none()
        if profile is not None:
            await self.db.commit()
            return profile, True

        profile = await self._apply_changes(user_id, changes, now)
        await self.db.commit()
        return profile, False

    async def update(self, user_id: UUID, changes: dict[str, Any]) -> UserProfile | None:
        """Merge ``changes`` into an existing profile. Returns None if there is none."""
        profile = await self._apply_changes(user_id, changes, datetime.now(timezone.utc))
        await self.db.commit()
        return profile

    async def _apply_changes(
        self,
        user_id: UUID,
        changes: dict[str, Any],
        now: datetime,
    ) -> UserProfile | None:
        stmt = (
            update(UserProfile)
            .where(UserProfile.user_id == user_id)
            .values(updated_at=now, **changes)
            .returning(UserProfile)
        )
        result = await self.db.execute(stmt, execution_options=REFRESH_OPTIONS)
        return result.scalar_one_or_none()
