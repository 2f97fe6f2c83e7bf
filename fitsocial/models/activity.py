"""
Activity ledger model - immutable scoring events.

The ledger is the source of truth for score history; the activity_score
column on IndividualProfile is a rollup derived from it.
"""

from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import JSON, ForeignKey, Index, Integer, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from fitsocial.database import Base


class ActivityKind(str, Enum):
    """Closed set of scoring events. Point values are chosen by callers."""

    WORKOUT_POSTED = "workout_posted"
    EVENT_CREATED = "event_created"
    EVENT_JOINED = "event_joined"
    FOLLOWER_GAINED = "follower_gained"
    PROFILE_COMPLETED = "profile_completed"
    WEEKLY_STREAK = "weekly_streak"
    MONTHLY_MILESTONE = "monthly_milestone"
    COMMUNITY_INTERACTION = "community_interaction"
    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
    MANUAL_ADJUSTMENT = "manual_adjustment"


class ActivityTransaction(Base):
    """
    Append-only ledger entry.

    activity_metadata example:
        {"workout_type": "strength", "streak_days": 7}
    """

    __tablename__ = "activity_transactions"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    activity_kind: Mapped[ActivityKind] = mapped_column(
        SQLEnum(ActivityKind, name="activity_kind"), index=True
    )
    points: Mapped[int] = mapped_column(Integer)
    description: Mapped[str] = mapped_column(String(500), default="")
    related_id: Mapped[Optional[str]] = mapped_column(String(255))
    activity_metadata: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON)

    __table_args__ = (
        Index("idx_activity_user_created", "user_id", "created_at"),
        Index("idx_activity_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ActivityTransaction(id={self.id}, user_id={self.user_id}, kind='{self.activity_kind}', points={self.points})>"
