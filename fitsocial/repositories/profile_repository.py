"""
Profile Repository - Data access for the three profile variants.

One repository instance serves all variants; every call names the kind and
the matching table is picked from PROFILE_MODELS.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.models.profile import IndividualProfile, Profile, profile_model_for
from fitsocial.models.user import User, UserKind


class ProfileRepository:
    """Kind-dispatching repository for IndividualProfile, GymProfile, BrandProfile."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_user(self, kind: UserKind, user_id: int) -> Optional[Profile]:
        """
        Get the profile of a given kind for a user.

        Args:
            kind: Which variant table to read
            user_id: Owning user

        Returns:
            Profile instance or None
        """
        model = profile_model_for(kind)
        result = await self.db.execute(select(model).where(model.user_id == user_id))
        return result.scalar_one_or_none()

    async def exists_any(self, user_id: int) -> bool:
        """True when the user owns a profile of any variant."""
        for kind in UserKind:
            model = profile_model_for(kind)
            result = await self.db.execute(
                select(model.id).where(model.user_id == user_id)
            )
            if result.first() is not None:
                return True
        return False

    async def create(
        self, kind: UserKind, user_id: int, payload: Dict[str, Any]
    ) -> Profile:
        model = profile_model_for(kind)
        profile = model(user_id=user_id, **payload)
        self.db.add(profile)
        await self.db.flush()
        await self.db.refresh(profile)
        return profile

    async def apply_updates(self, profile: Profile, updates: Dict[str, Any]) -> Profile:
        """Replace each given top-level field and stamp updated_at."""
        for field, value in updates.items():
            setattr(profile, field, value)
        profile.updated_at = datetime.now(timezone.utc)
        await self.db.flush()
        await self.db.refresh(profile)
        return profile

    # Individual-specific queries

    async def apply_score_delta(
        self, user_id: int, points: int, at: datetime
    ) -> Optional[int]:
        """
        Apply score = max(0, score + points) in a single UPDATE.

        Args:
            user_id: Owner of the individual profile
            points: Signed delta
            at: Timestamp stored as last_activity_update

        Returns:
            The new score, or None when the user has no individual profile
        """
        new_score = IndividualProfile.activity_score + points
        result = await self.db.execute(
            update(IndividualProfile)
            .where(IndividualProfile.user_id == user_id)
            .values(
                activity_score=case((new_score < 0, 0), else_=new_score),
                last_activity_update=at,
            )
            .returning(IndividualProfile.activity_score)
            .execution_options(synchronize_session="fetch")
        )
        row = result.first()
        return None if row is None else row[0]

    async def set_score(self, user_id: int, score: int) -> None:
        await self.db.execute(
            update(IndividualProfile)
            .where(IndividualProfile.user_id == user_id)
            .values(activity_score=score)
            .execution_options(synchronize_session="fetch")
        )

    async def list_individuals(
        self, user_id: Optional[int] = None
    ) -> List[IndividualProfile]:
        query = select(IndividualProfile)
        if user_id is not None:
            query = query.where(IndividualProfile.user_id == user_id)
        result = await self.db.execute(query.order_by(IndividualProfile.id))
        return list(result.scalars().all())

    async def list_trainers(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Individuals offering training, highest activity first."""
        result = await self.db.execute(
            select(IndividualProfile, User)
            .join(User, User.id == IndividualProfile.user_id)
            .where(IndividualProfile.is_training_enabled.is_(True))
            .order_by(IndividualProfile.activity_score.desc(), IndividualProfile.id)
            .limit(limit)
        )
        return [{"profile": profile, "user": user} for profile, user in result.all()]
