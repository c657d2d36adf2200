"""User profile model for extended account attributes."""

from sqlalchemy import (
    TIMESTAMP,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from profile_api.database import Base

# Columns a client may write; everything else is server-assigned.
PROFILE_FIELDS = (
    "age",
    "date_of_birth",
    "phone",
    "country_code",
    "country",
    "state",
    "city",
)


class UserProfile(Base):
    """
    Optional one-to-one profile attached to a user account.

    ``user_id`` is unique so the create-or-update path can rely on
    ``ON CONFLICT (user_id)``.
    """

    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    age = Column(Integer)
    date_of_birth = Column(Text)
    phone = Column(Text)
    country_code = Column(String(5))
    country = Column(Text)
    state = Column(Text)
    city = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", name="uq_user_profiles_user_id"),)

    user = relationship("User", back_populates="profile")
