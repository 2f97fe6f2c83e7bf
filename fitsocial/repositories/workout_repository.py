"""
Workout Repository - Data access for workout logs.
"""

from typing import List

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.models.workout import Workout
from fitsocial.repositories.base import BaseRepository


class WorkoutRepository(BaseRepository[Workout]):
    def __init__(self, db: AsyncSession):
        super().__init__(Workout, db)

    async def get_user_workouts(
        self, user_id: int, skip: int = 0, limit: int = 20
    ) -> List[Workout]:
        """One user's logs, newest first."""
        result = await self.db.execute(
            select(Workout)
            .where(Workout.user_id == user_id)
            .order_by(desc(Workout.created_at), desc(Workout.id))
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())
