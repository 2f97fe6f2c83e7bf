"""
Unit tests for the activity ledger and score rollup.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from fitsocial.core.exceptions import InvalidActivityKindError, NotFoundError, ValidationError
from fitsocial.models.activity import ActivityKind
from fitsocial.models.user import User, UserKind
from fitsocial.services.activity_service import (
    ActivityService,
    parse_activity_kind,
    replay_score,
)


@pytest.mark.unit
class TestReplayScore:
    def test_negative_start_is_floored_before_gain(self):
        assert replay_score([-50, 100]) == 100

    def test_loss_larger_than_score_clamps_to_zero(self):
        assert replay_score([10, -30]) == 0

    def test_clamp_applies_at_every_step(self):
        # 10 -> 0 -> 5; summing without clamping gives -15
        assert replay_score([10, -30, 5]) == 5
        assert replay_score([20, -5, -100, 40, -10]) == 30

    def test_empty_ledger(self):
        assert replay_score([]) == 0


@pytest.mark.unit
class TestParseActivityKind:
    def test_known_kind(self):
        assert parse_activity_kind("workout_posted") == ActivityKind.WORKOUT_POSTED

    def test_unknown_kind(self):
        with pytest.raises(InvalidActivityKindError):
            parse_activity_kind("sleeping_in")


@pytest.mark.unit
class TestActivityService:
    @pytest.fixture
    def service(self, mock_db, mock_invalidator):
        service = ActivityService(mock_db, invalidator=mock_invalidator)
        service.user_repo = AsyncMock()
        service.profile_repo = AsyncMock()
        service.activity_repo = AsyncMock()
        service.activity_repo.append = AsyncMock(return_value=Mock(id=41))
        return service

    @pytest.mark.asyncio
    async def test_invalid_kind_writes_nothing(self, service, mock_db):
        with pytest.raises(InvalidActivityKindError):
            await service.record_activity(1, "teleported", 10)

        service.activity_repo.append.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_integer_points_rejected(self, service):
        with pytest.raises(ValidationError):
            await service.record_activity(1, "workout_posted", 2.5)
        with pytest.raises(ValidationError):
            await service.record_activity(1, "workout_posted", True)

    @pytest.mark.asyncio
    async def test_unknown_user(self, service, mock_db):
        service.user_repo.get = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError):
            await service.record_activity(1, "workout_posted", 10)

        service.activity_repo.append.assert_not_called()

    @pytest.mark.asyncio
    async def test_individual_gets_rollup_and_cache_invalidation(
        self, service, mock_db, mock_invalidator
    ):
        service.user_repo.get = AsyncMock(return_value=User(id=1, kind=UserKind.INDIVIDUAL))
        service.profile_repo.apply_score_delta = AsyncMock(return_value=60)

        transaction_id = await service.record_activity(1, "weekly_streak", 60)

        assert transaction_id == 41
        service.profile_repo.apply_score_delta.assert_awaited_once()
        mock_db.commit.assert_awaited_once()
        mock_invalidator.invalidate_for_event.assert_awaited_once_with("score_changed")

    @pytest.mark.asyncio
    async def test_gym_gets_ledger_only(self, service, mock_db, mock_invalidator):
        service.user_repo.get = AsyncMock(return_value=User(id=2, kind=UserKind.GYM))

        await service.record_activity(2, "event_created", 25)

        service.activity_repo.append.assert_awaited_once()
        service.profile_repo.apply_score_delta.assert_not_called()
        mock_db.commit.assert_awaited_once()
        mock_invalidator.invalidate_for_event.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_profile_keeps_ledger_row(self, service, mock_db, mock_invalidator):
        service.user_repo.get = AsyncMock(return_value=User(id=3, kind=UserKind.INDIVIDUAL))
        service.profile_repo.apply_score_delta = AsyncMock(return_value=None)
        service.logger = Mock()

        transaction_id = await service.record_activity(3, "workout_posted", 10)

        assert transaction_id == 41
        service.logger.warning.assert_called_once()
        mock_db.commit.assert_awaited_once()
        mock_invalidator.invalidate_for_event.assert_not_called()
