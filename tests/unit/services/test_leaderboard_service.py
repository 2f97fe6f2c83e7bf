"""
Unit tests for leaderboard paging and caching.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from fitsocial.config import settings
from fitsocial.core.exceptions import ValidationError
from fitsocial.models.profile import IndividualProfile
from fitsocial.models.user import User, UserKind
from fitsocial.services.leaderboard_service import LeaderboardService


def _row(user_id, score):
    return {
        "user": User(id=user_id, username=f"user{user_id}", kind=UserKind.INDIVIDUAL),
        "profile": IndividualProfile(
            user_id=user_id,
            activity_score=score,
            last_activity_update=datetime(2026, 1, 1, tzinfo=timezone.utc),
        ),
    }


@pytest.mark.unit
class TestLeaderboardService:
    @pytest.fixture
    def service(self, mock_db, mock_cache_manager):
        service = LeaderboardService(mock_db, cache=mock_cache_manager)
        service.leaderboard_repo = AsyncMock()
        return service

    @pytest.mark.asyncio
    async def test_entries_are_numbered_from_one(self, service):
        service.leaderboard_repo.get_top = AsyncMock(return_value=[_row(1, 90), _row(2, 40)])

        entries = await service.get_leaderboard(2)

        assert [entry["position"] for entry in entries] == [1, 2]
        assert entries[0]["user"]["username"] == "user1"
        assert entries[0]["activity_score"] == 90

    @pytest.mark.asyncio
    async def test_default_and_cap(self, service):
        service.leaderboard_repo.get_top = AsyncMock(return_value=[])

        await service.get_leaderboard()
        service.leaderboard_repo.get_top.assert_awaited_with(settings.leaderboard_default_limit)

        await service.get_leaderboard(settings.leaderboard_max_limit + 500)
        service.leaderboard_repo.get_top.assert_awaited_with(settings.leaderboard_max_limit)

    @pytest.mark.asyncio
    async def test_non_positive_limit(self, service):
        with pytest.raises(ValidationError):
            await service.get_leaderboard(0)

    @pytest.mark.asyncio
    async def test_cached_page_skips_database(self, service, mock_redis):
        mock_redis.get = AsyncMock(return_value=b'[{"position": 1}]')

        entries = await service.get_leaderboard(10)

        assert entries == [{"position": 1}]
        service.leaderboard_repo.get_top.assert_not_called()

    @pytest.mark.asyncio
    async def test_fresh_page_is_cached_hot(self, service, mock_redis):
        service.leaderboard_repo.get_top = AsyncMock(return_value=[_row(1, 5)])

        await service.get_leaderboard(10)

        key, ttl, _ = mock_redis.setex.call_args[0]
        assert key == "fitsocial:leaderboard:top:10"
        assert ttl == 60
