"""
Unit tests for workout scoring and the logging rules.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from fitsocial.core.exceptions import EmptyWorkoutError, NotAnIndividualError, NotFoundError
from fitsocial.models.activity import ActivityKind
from fitsocial.models.user import User, UserKind
from fitsocial.services.workout_service import WorkoutService, calculate_activity_score


@pytest.mark.unit
class TestActivityScore:
    def test_resistance_volume(self):
        score = calculate_activity_score(
            resistance_details=[
                {"exercise": "bench", "sets": 3, "reps": [10, 8, 6], "weight": [50, 60, 70]}
            ]
        )

        assert score == 140

    def test_missing_set_entries_count_as_zero(self):
        score = calculate_activity_score(
            resistance_details=[
                {"exercise": "row", "sets": 3, "reps": [10], "weight": [50, 60]}
            ]
        )

        assert score == 50

    def test_cardio_weighting(self):
        assert calculate_activity_score(
            cardio_details=[{"type": "run", "distance": 5, "duration": 30}]
        ) == 55
        assert calculate_activity_score(cardio_details=[{"type": "row", "distance": 4}]) == 10
        assert calculate_activity_score(cardio_details=[{"type": "bike", "duration": 20}]) == 40

    def test_mobility_duration(self):
        assert calculate_activity_score(
            mobility_details=[{"type": "yoga", "duration": 15}]
        ) == 18

    def test_sections_add_up(self):
        score = calculate_activity_score(
            resistance_details=[{"exercise": "squat", "sets": 1, "reps": [5], "weight": [100]}],
            cardio_details=[{"type": "run", "duration": 10}],
            mobility_details=[{"type": "stretch", "duration": 10}],
        )

        assert score == 50 + 20 + 12

    def test_halves_round_up(self):
        assert calculate_activity_score(cardio_details=[{"type": "run", "distance": 1}]) == 3

    def test_empty_log_scores_zero(self):
        assert calculate_activity_score() == 0
        assert calculate_activity_score([], [], []) == 0


@pytest.mark.unit
class TestWorkoutService:
    @pytest.fixture
    def service(self, mock_db, mock_invalidator):
        service = WorkoutService(mock_db, invalidator=mock_invalidator)
        service.user_repo = AsyncMock()
        service.profile_repo = AsyncMock()
        service.workout_repo = AsyncMock()
        service.user_repo.get = AsyncMock(return_value=User(id=1, kind=UserKind.INDIVIDUAL))
        service.workout_repo.create = AsyncMock(return_value=Mock(id=9))
        service.activity_service.stage_activity = AsyncMock(return_value=(Mock(id=3), True))
        return service

    @pytest.mark.asyncio
    async def test_log_stages_ledger_entry_and_commits_once(
        self, service, mock_db, mock_invalidator
    ):
        result = await service.log_workout(
            1, cardio_details=[{"type": "run", "distance": 5, "duration": 30}]
        )

        assert result == {"workout_id": 9, "score": 55}
        user, kind, points = service.activity_service.stage_activity.call_args[0]
        assert (user.id, kind, points) == (1, ActivityKind.WORKOUT_POSTED, 55)
        assert service.activity_service.stage_activity.call_args[1]["related_id"] == "9"
        mock_db.commit.assert_awaited_once()
        mock_invalidator.invalidate_for_event.assert_awaited_once_with("score_changed")

    @pytest.mark.asyncio
    async def test_empty_log_writes_nothing(self, service, mock_db):
        with pytest.raises(EmptyWorkoutError):
            await service.log_workout(1, resistance_details=[], cardio_details=None)

        service.workout_repo.create.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_gym_cannot_log(self, service, mock_db):
        service.user_repo.get = AsyncMock(return_value=User(id=2, kind=UserKind.GYM))

        with pytest.raises(NotAnIndividualError):
            await service.log_workout(2, mobility_details=[{"type": "yoga", "duration": 10}])

        service.workout_repo.create.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_individual_needs_a_profile(self, service, mock_db):
        service.profile_repo.get_by_user = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError):
            await service.log_workout(1, mobility_details=[{"type": "yoga", "duration": 10}])

        service.workout_repo.create.assert_not_called()
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_listing_requires_an_individual(self, service):
        service.user_repo.get = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError):
            await service.list_workouts(5)

        service.workout_repo.get_user_workouts.assert_not_called()
