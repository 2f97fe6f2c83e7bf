"""
Profile models - one kind-specific record per user.

Profiles form a tagged union keyed by User.kind:
- IndividualProfile for athletes and trainers (carries the activity score)
- GymProfile for gyms
- BrandProfile for brands

PROFILE_MODELS maps each kind to its table; read and write paths dispatch
on that mapping instead of inspecting which fields a record happens to have.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Type, Union

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Float, ForeignKey
from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fitsocial.database import Base
from fitsocial.models.user import UserKind


class IndividualProfile(Base):
    """
    Individual (athlete/trainer) profile.

    stats example:
        {"height": 180, "weight": 82, "body_fat": 14,
         "personal_records": [{"exercise_name": "Bench Press", "subtitle": "120kg", "date": ...}]}
    """

    __tablename__ = "individual_profiles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), unique=True, index=True
    )

    stats: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON)
    experiences: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON)
    certifications: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON)
    affiliation: Mapped[Optional[str]] = mapped_column(String(255))
    social_links: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON)

    is_training_enabled: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    training_price: Mapped[Optional[float]] = mapped_column(Float)  # None means free

    # Rollup of activity_transactions, never below zero
    activity_score: Mapped[int] = mapped_column(Integer, default=0)
    last_activity_update: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        CheckConstraint("activity_score >= 0", name="ck_individual_activity_score"),
        Index(
            "idx_individual_ranking",
            "activity_score",
            "last_activity_update",
        ),
    )

    def __repr__(self) -> str:
        return f"<IndividualProfile(id={self.id}, user_id={self.user_id}, score={self.activity_score})>"


class GymProfile(Base):
    """
    Gym profile.

    business_info example:
        {"address": "...", "phone": "...", "website": "...",
         "operating_hours": {"monday": "6-22", ...}}
    """

    __tablename__ = "gym_profiles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), unique=True, index=True
    )

    business_info: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON)
    amenities: Mapped[Optional[List[str]]] = mapped_column(JSON)
    membership_plans: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON)
    stats: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON)
    verification: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON)

    def __repr__(self) -> str:
        return f"<GymProfile(id={self.id}, user_id={self.user_id})>"


class BrandProfile(Base):
    """Brand profile: business info, partnerships and campaigns."""

    __tablename__ = "brand_profiles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), unique=True, index=True
    )

    business_info: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON)
    partnerships: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON)
    campaigns: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON)
    verification: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON)

    def __repr__(self) -> str:
        return f"<BrandProfile(id={self.id}, user_id={self.user_id})>"


Profile = Union[IndividualProfile, GymProfile, BrandProfile]

PROFILE_MODELS: Dict[UserKind, Type[Base]] = {
    UserKind.INDIVIDUAL: IndividualProfile,
    UserKind.GYM: GymProfile,
    UserKind.BRAND: BrandProfile,
}

# Columns never writable through profile edits
PROTECTED_PROFILE_FIELDS = frozenset(
    {
        "id",
        "user_id",
        "activity_score",
        "last_activity_update",
        "created_at",
        "updated_at",
    }
)


def profile_model_for(kind: UserKind) -> Type[Base]:
    """Return the profile table for a user kind."""
    return PROFILE_MODELS[UserKind(kind)]


def editable_profile_fields(kind: UserKind) -> frozenset:
    model = profile_model_for(kind)
    return frozenset(model.__table__.columns.keys()) - PROTECTED_PROFILE_FIELDS
