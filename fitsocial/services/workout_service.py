"""
Workout Service - Typed workout logs and the activity points they earn.

A logged workout is stored, scored, and appended to the activity ledger as
a workout_posted entry in one transaction, so the score rollup always has a
ledger row and a workout behind it.
"""

import math
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.core.cache import CacheInvalidator
from fitsocial.core.exceptions import (
    EmptyWorkoutError,
    NotAnIndividualError,
    NotFoundError,
)
from fitsocial.models.activity import ActivityKind
from fitsocial.models.user import User, UserKind
from fitsocial.models.workout import Workout
from fitsocial.repositories.profile_repository import ProfileRepository
from fitsocial.repositories.user_repository import UserRepository
from fitsocial.repositories.workout_repository import WorkoutRepository
from fitsocial.services.activity_service import ActivityService
from fitsocial.services.base import BaseService

Details = Optional[List[Dict[str, Any]]]

RESISTANCE_VOLUME_FACTOR = 0.1
CARDIO_DISTANCE_FACTOR = 2
CARDIO_DURATION_FACTOR = 1.5
CARDIO_DISTANCE_ONLY_FACTOR = 2.5
CARDIO_DURATION_ONLY_FACTOR = 2
MOBILITY_DURATION_FACTOR = 1.2


def _at(values: List[Any], index: int) -> float:
    return (values[index] if index < len(values) else 0) or 0


def calculate_activity_score(
    resistance_details: Details = None,
    cardio_details: Details = None,
    mobility_details: Details = None,
) -> int:
    """
    Points earned by a workout log.

    - resistance: 0.1 x weight x reps, summed over each exercise's sets
      (a missing weight or rep count counts as 0)
    - cardio: distance x 2 + duration x 1.5 when both are given,
      distance x 2.5 or duration x 2 when only one is
    - mobility: duration x 1.2

    The total is rounded half up.

    >>> calculate_activity_score(resistance_details=[
    ...     {"exercise": "squat", "sets": 2, "reps": [5, 5], "weight": [100, 100]}])
    100
    >>> calculate_activity_score(cardio_details=[{"type": "run", "distance": 5}])
    13
    """
    score = 0.0

    for exercise in resistance_details or []:
        reps = exercise.get("reps") or []
        weights = exercise.get("weight") or []
        for index in range(int(exercise.get("sets") or 0)):
            score += _at(weights, index) * _at(reps, index) * RESISTANCE_VOLUME_FACTOR

    for session in cardio_details or []:
        distance = session.get("distance")
        duration = session.get("duration")
        if distance and duration:
            score += distance * CARDIO_DISTANCE_FACTOR + duration * CARDIO_DURATION_FACTOR
        elif distance:
            score += distance * CARDIO_DISTANCE_ONLY_FACTOR
        elif duration:
            score += duration * CARDIO_DURATION_ONLY_FACTOR

    for session in mobility_details or []:
        score += (session.get("duration") or 0) * MOBILITY_DURATION_FACTOR

    return math.floor(score + 0.5)


class WorkoutService(BaseService):
    def __init__(
        self, db: AsyncSession, invalidator: Optional[CacheInvalidator] = None
    ):
        super().__init__(db)
        self.user_repo = UserRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.workout_repo = WorkoutRepository(db)
        self.activity_service = ActivityService(db, invalidator)

    async def _get_individual(self, user_id: int) -> User:
        user = await self.user_repo.get(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.kind != UserKind.INDIVIDUAL:
            raise NotAnIndividualError()
        return user

    async def log_workout(
        self,
        user_id: int,
        resistance_details: Details = None,
        cardio_details: Details = None,
        mobility_details: Details = None,
    ) -> Dict[str, int]:
        """
        Store a workout log and award its points.

        Returns:
            {"workout_id": int, "score": int}

        Raises:
            NotFoundError: Unknown user or missing individual profile
            NotAnIndividualError: The user is a gym or brand, or has no kind
            EmptyWorkoutError: No details of any kind
        """
        self._log_operation("log_workout", user_id=user_id)

        if not (resistance_details or cardio_details or mobility_details):
            raise EmptyWorkoutError()

        try:
            user = await self._get_individual(user_id)
            if not await self.profile_repo.get_by_user(UserKind.INDIVIDUAL, user_id):
                raise NotFoundError("Individual profile not found")

            score = calculate_activity_score(
                resistance_details, cardio_details, mobility_details
            )
            workout = await self.workout_repo.create(
                {
                    "user_id": user_id,
                    "resistance_details": resistance_details or None,
                    "cardio_details": cardio_details or None,
                    "mobility_details": mobility_details or None,
                    "activity_score": score,
                }
            )
            _, score_changed = await self.activity_service.stage_activity(
                user,
                ActivityKind.WORKOUT_POSTED,
                score,
                description="Posted a workout log",
                related_id=str(workout.id),
            )

            await self.db.commit()

        except Exception as error:
            await self._handle_service_error(error, "log workout")

        if score_changed:
            await self.activity_service.invalidator.invalidate_for_event("score_changed")

        self.logger.info(f"User {user_id} logged workout {workout.id} for {score} points")
        return {"workout_id": workout.id, "score": score}

    async def list_workouts(
        self, user_id: int, skip: int = 0, limit: int = 20
    ) -> List[Workout]:
        """An individual's workout logs, newest first."""
        await self._get_individual(user_id)
        return await self.workout_repo.get_user_workouts(user_id, skip=skip, limit=limit)
