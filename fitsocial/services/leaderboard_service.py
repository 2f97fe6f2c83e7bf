"""
Leaderboard Service - Ranking of individuals by activity score.

Ranking order: activity_score descending, then earlier last_activity_update
(whoever reached the score first), then profile id.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.config import settings
from fitsocial.core.cache import LEADERBOARD_NAMESPACE, CacheManager, cache_manager
from fitsocial.core.exceptions import ValidationError
from fitsocial.repositories.leaderboard_repository import LeaderboardRepository
from fitsocial.services.base import BaseService


class LeaderboardService(BaseService):
    def __init__(self, db: AsyncSession, cache: Optional[CacheManager] = None):
        super().__init__(db)
        self.leaderboard_repo = LeaderboardRepository(db)
        self.cache = cache or cache_manager

    async def get_leaderboard(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Top individuals, at most `limit` entries (capped by settings).

        Any page is a prefix of every larger page.
        """
        if limit is None:
            limit = settings.leaderboard_default_limit
        if limit < 1:
            raise ValidationError("limit must be positive")
        limit = min(limit, settings.leaderboard_max_limit)

        cache_key = f"top:{limit}"
        cached = await self.cache.get(cache_key, namespace=LEADERBOARD_NAMESPACE)
        if cached is not None:
            return cached

        rows = await self.leaderboard_repo.get_top(limit)
        entries = [
            {
                "position": index + 1,
                "user": row["user"].summary(),
                "activity_score": row["profile"].activity_score,
                "last_activity_update": row["profile"].last_activity_update.isoformat()
                if row["profile"].last_activity_update
                else None,
            }
            for index, row in enumerate(rows)
        ]

        await self.cache.set(
            cache_key, entries, namespace=LEADERBOARD_NAMESPACE, cache_layer="hot"
        )
        return entries

    async def get_user_ranking(self, user_id: int) -> Optional[Dict[str, int]]:
        """
        1-based position of the user in the full ranking.

        Returns:
            {"position", "total_users", "activity_score"}, or None when the
            user has no individual profile
        """
        return await self.leaderboard_repo.get_position(user_id)
