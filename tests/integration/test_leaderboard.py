"""
Integration tests for leaderboard ordering and positions.
"""

from datetime import datetime, timedelta, timezone
from fnmatch import fnmatch
from unittest.mock import AsyncMock

import pytest

from fitsocial.core.cache import CacheInvalidator, CacheManager
from fitsocial.models.user import UserKind
from fitsocial.services.leaderboard_service import LeaderboardService
from fitsocial.services.profile_service import ProfileService
from fitsocial.services.user_service import UserService


@pytest.mark.integration
class TestLeaderboard:
    @pytest.fixture
    async def ranked(self, factory):
        base = datetime(2026, 3, 1, tzinfo=timezone.utc)
        await factory.individual("late_tie", score=80, last_update=base + timedelta(hours=2))
        await factory.individual("leader", score=120, last_update=base)
        await factory.individual("early_tie", score=80, last_update=base + timedelta(hours=1))
        await factory.individual("rookie", score=0, last_update=base)
        await factory.gym("ironworks")

    @pytest.mark.asyncio
    async def test_order_with_tie_break(self, db_session, ranked):
        entries = await LeaderboardService(db_session).get_leaderboard(10)

        assert [entry["user"]["username"] for entry in entries] == [
            "leader",
            "early_tie",
            "late_tie",
            "rookie",
        ]
        assert [entry["position"] for entry in entries] == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_scores_never_increase_down_the_board(self, db_session, ranked):
        entries = await LeaderboardService(db_session).get_leaderboard(10)
        scores = [entry["activity_score"] for entry in entries]

        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_smaller_page_is_a_prefix(self, db_session, ranked):
        service = LeaderboardService(db_session)

        top_two = await service.get_leaderboard(2)
        everyone = await service.get_leaderboard(10)

        assert top_two == everyone[:2]

    @pytest.mark.asyncio
    async def test_gyms_and_brands_are_not_ranked(self, db_session, factory, ranked):
        brand = await factory.brand("shoeco")
        entries = await LeaderboardService(db_session).get_leaderboard(10)

        assert "ironworks" not in {entry["user"]["username"] for entry in entries}
        assert await LeaderboardService(db_session).get_user_ranking(brand.id) is None

    @pytest.mark.asyncio
    async def test_user_ranking_matches_the_board(self, db_session, ranked):
        service = LeaderboardService(db_session)
        entries = await service.get_leaderboard(10)

        for entry in entries:
            ranking = await service.get_user_ranking(entry["user"]["id"])
            assert ranking == {
                "position": entry["position"],
                "total_users": 4,
                "activity_score": entry["activity_score"],
            }

    @pytest.mark.asyncio
    async def test_unknown_user_has_no_ranking(self, db_session, ranked):
        assert await LeaderboardService(db_session).get_user_ranking(9999) is None


def _dict_backed_redis():
    """AsyncMock Redis whose get/setex/keys/delete share one dict."""
    store = {}

    async def setex(key, ttl, value):
        store[key] = value
        return True

    async def keys(pattern):
        return [key for key in store if fnmatch(key, pattern)]

    async def delete(*keys):
        return sum(1 for key in keys if store.pop(key, None) is not None)

    redis_client = AsyncMock()
    redis_client.get = AsyncMock(side_effect=lambda key: store.get(key))
    redis_client.setex = AsyncMock(side_effect=setex)
    redis_client.keys = AsyncMock(side_effect=keys)
    redis_client.delete = AsyncMock(side_effect=delete)
    return redis_client


@pytest.mark.integration
@pytest.mark.cache
class TestCachedLeaderboard:
    @pytest.fixture
    def cache(self):
        cache = CacheManager()
        cache.redis_client = _dict_backed_redis()
        return cache

    @pytest.mark.asyncio
    async def test_new_individual_appears_on_cached_board(
        self, db_session, factory, cache
    ):
        await factory.individual("veteran", score=30)
        newbie = await factory.user("newbie", kind=UserKind.INDIVIDUAL)
        newbie_id = newbie.id
        leaderboard = LeaderboardService(db_session, cache=cache)

        assert len(await leaderboard.get_leaderboard(10)) == 1

        await ProfileService(
            db_session, invalidator=CacheInvalidator(cache)
        ).create_profile(newbie_id, "individual", {})

        entries = await leaderboard.get_leaderboard(10)
        ranking = await leaderboard.get_user_ranking(newbie_id)
        assert len(entries) == ranking["total_users"] == 2
        assert entries[ranking["position"] - 1]["user"]["username"] == "newbie"

    @pytest.mark.asyncio
    async def test_onboarded_individual_appears_on_cached_board(
        self, db_session, factory, cache
    ):
        await factory.individual("veteran", score=30)
        newcomer = await factory.user("newcomer")
        newcomer_id = newcomer.id
        leaderboard = LeaderboardService(db_session, cache=cache)

        assert len(await leaderboard.get_leaderboard(10)) == 1

        await UserService(
            db_session, invalidator=CacheInvalidator(cache)
        ).complete_onboarding(newcomer_id, "individual", {})

        usernames = [entry["user"]["username"] for entry in await leaderboard.get_leaderboard(10)]
        assert usernames == ["veteran", "newcomer"]

    @pytest.mark.asyncio
    async def test_board_is_served_from_cache_between_changes(
        self, db_session, factory, cache
    ):
        await factory.individual("veteran", score=30)
        leaderboard = LeaderboardService(db_session, cache=cache)

        await leaderboard.get_leaderboard(10)
        await factory.gym("ironworks")
        await leaderboard.get_leaderboard(10)

        assert cache.get_stats()["hits"] == 1
