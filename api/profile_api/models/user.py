"""User account model.

Accounts are owned by the external auth provider; only the columns the
profile feature needs are mapped here.
"""

import uuid

from sqlalchemy import TIMESTAMP, Column, String, Text, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship

from profile_api.database import Base


class User(Base):
    """User account model."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String)
    name = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    profile = relationship(
        "UserProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
