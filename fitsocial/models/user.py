"""
User model - identity root for every account.

This model handles:
1. The link to the external identity provider (external_id)
2. Public identity (username, avatar, bio)
3. The kind discriminator selecting the profile variant
4. Denormalized follower/following counters
"""

from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Integer, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from fitsocial.database import Base


class UserKind(str, Enum):
    """Discriminator for the profile variant attached to a user."""

    INDIVIDUAL = "individual"
    GYM = "gym"
    BRAND = "brand"


class User(Base):
    """
    User model representing system accounts.

    Design decisions:
    - external_id is the identity provider's subject, one row per subject
    - kind stays NULL until onboarding picks a variant
    - follower_count/following_count are cached aggregates of follow_edges,
      kept in step by the social graph service and repairable by recount
    """

    __tablename__ = "users"

    external_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), index=True)
    bio: Mapped[Optional[str]] = mapped_column(Text)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500))

    kind: Mapped[Optional[UserKind]] = mapped_column(
        SQLEnum(UserKind, name="user_kind"), index=True
    )

    follower_count: Mapped[int] = mapped_column(Integer, default=0, index=True)
    following_count: Mapped[int] = mapped_column(Integer, default=0)

    onboarding_complete: Mapped[bool] = mapped_column(Boolean, default=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    is_premium: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    __table_args__ = (
        CheckConstraint("follower_count >= 0", name="ck_users_follower_count"),
        CheckConstraint("following_count >= 0", name="ck_users_following_count"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"

    def summary(self) -> dict:
        """Compact public representation used when embedding authors."""
        return {
            "id": self.id,
            "username": self.username,
            "avatar_url": self.avatar_url,
            "kind": self.kind.value if self.kind else None,
            "is_verified": self.is_verified,
            "is_premium": self.is_premium,
        }
