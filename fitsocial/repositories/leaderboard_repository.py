"""
Leaderboard Repository - Ranking queries over individual profiles.

All queries share one total order:
    activity_score DESC, last_activity_update ASC, profile id ASC
so a position from get_position always matches the index of the same
profile in get_top.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.models.profile import IndividualProfile
from fitsocial.models.user import User

RANKING_ORDER = (
    IndividualProfile.activity_score.desc(),
    IndividualProfile.last_activity_update.asc(),
    IndividualProfile.id.asc(),
)


class LeaderboardRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_top(self, limit: int) -> List[Dict[str, Any]]:
        """Top individuals joined with their user rows."""
        result = await self.db.execute(
            select(IndividualProfile, User)
            .join(User, User.id == IndividualProfile.user_id)
            .order_by(*RANKING_ORDER)
            .limit(limit)
        )
        return [{"profile": profile, "user": user} for profile, user in result.all()]

    async def get_position(self, user_id: int) -> Optional[Dict[str, int]]:
        """
        1-based rank of a user's individual profile.

        A row_number() window over the full ranking order yields the exact
        position a full descending sort would give, without materializing
        every profile in Python.

        Returns:
            {"position", "total_users", "activity_score"} or None when the
            user has no individual profile
        """
        ranked = select(
            IndividualProfile.user_id.label("user_id"),
            IndividualProfile.activity_score.label("activity_score"),
            func.row_number().over(order_by=RANKING_ORDER).label("position"),
            func.count().over().label("total_users"),
        ).subquery()

        result = await self.db.execute(
            select(
                ranked.c.position,
                ranked.c.total_users,
                ranked.c.activity_score,
            ).where(ranked.c.user_id == user_id)
        )
        row = result.first()
        if row is None:
            return None

        return {
            "position": int(row.position),
            "total_users": int(row.total_users),
            "activity_score": int(row.activity_score),
        }
