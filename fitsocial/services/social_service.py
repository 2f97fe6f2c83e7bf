"""
Social Service - Directed follow graph with cached counters.

Invariants kept by every operation:
1. At most one edge per (follower, following) pair
2. No self-edges
3. follower_count / following_count move together with the edge, in the
   same transaction, and never drop below zero

Concurrent duplicates are decided by the store: a losing follow trips the
unique constraint and its whole transaction (counters included) is rolled
back; a losing unfollow deletes zero rows and changes nothing.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.core.exceptions import (
    AlreadyFollowingError,
    NotFollowingError,
    NotFoundError,
    SelfFollowError,
)
from fitsocial.models.user import User
from fitsocial.repositories.follow_repository import FollowRepository
from fitsocial.repositories.user_repository import UserRepository
from fitsocial.services.base import BaseService


class SocialService(BaseService):
    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.user_repo = UserRepository(db)
        self.follow_repo = FollowRepository(db)

    async def follow(self, follower_id: int, following_id: int) -> bool:
        """
        Create the follow edge and bump both counters.

        Raises:
            SelfFollowError: If follower_id == following_id
            NotFoundError: If either user does not exist
            AlreadyFollowingError: If the edge already exists
        """
        self._log_operation(
            "follow", follower_id=follower_id, following_id=following_id
        )

        if follower_id == following_id:
            raise SelfFollowError()

        try:
            if not await self.user_repo.exists(follower_id):
                raise NotFoundError("Follower not found")
            if not await self.user_repo.exists(following_id):
                raise NotFoundError("User to follow not found")

            if await self.follow_repo.is_following(follower_id, following_id):
                raise AlreadyFollowingError()

            await self.follow_repo.insert_edge(follower_id, following_id)
            await self._adjust_counters(follower_id, following_id, 1)

            await self.db.commit()
            return True

        except IntegrityError:
            # Lost a race against an identical follow
            await self.db.rollback()
            raise AlreadyFollowingError()
        except Exception as error:
            await self._handle_service_error(error, "follow user")

    async def unfollow(self, follower_id: int, following_id: int) -> bool:
        """
        Remove the follow edge and decrement both counters (floored at 0).

        Raises:
            NotFollowingError: If no edge exists
        """
        self._log_operation(
            "unfollow", follower_id=follower_id, following_id=following_id
        )

        try:
            removed = await self.follow_repo.delete_edge(follower_id, following_id)
            if not removed:
                raise NotFollowingError()

            await self._adjust_counters(follower_id, following_id, -1)

            await self.db.commit()
            return True

        except Exception as error:
            await self._handle_service_error(error, "unfollow user")

    async def _adjust_counters(
        self, follower_id: int, following_id: int, delta: int
    ) -> None:
        if not await self.user_repo.adjust_follow_counters(
            following_id, follower_delta=delta
        ):
            self.logger.warning(f"Follower counter target {following_id} missing")
        if not await self.user_repo.adjust_follow_counters(
            follower_id, following_delta=delta
        ):
            self.logger.warning(f"Following counter target {follower_id} missing")

    async def is_following(self, follower_id: int, following_id: int) -> bool:
        return await self.follow_repo.is_following(follower_id, following_id)

    async def get_follow_status(self, viewer_id: int, target_id: int) -> Dict[str, bool]:
        """Relationship between viewer and target in both directions."""
        is_following = await self.follow_repo.is_following(viewer_id, target_id)
        is_followed_by = await self.follow_repo.is_following(target_id, viewer_id)
        return {
            "is_following": is_following,
            "is_followed_by": is_followed_by,
            "is_mutual": is_following and is_followed_by,
        }

    async def list_followers(
        self, user_id: int, skip: int = 0, limit: int = 50
    ) -> List[User]:
        if not await self.user_repo.exists(user_id):
            raise NotFoundError("User not found")
        return await self.follow_repo.get_followers(user_id, skip=skip, limit=limit)

    async def list_following(
        self, user_id: int, skip: int = 0, limit: int = 50
    ) -> List[User]:
        if not await self.user_repo.exists(user_id):
            raise NotFoundError("User not found")
        return await self.follow_repo.get_following(user_id, skip=skip, limit=limit)

    async def reconcile_follow_counters(
        self, user_id: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Recount edges and rewrite drifted counters.

        Returns:
            One correction per repaired user
        """
        self._log_operation("reconcile_follow_counters", user_id=user_id)

        try:
            drift = await self.user_repo.find_counter_drift(user_id)
            for entry in drift:
                await self.user_repo.set_follow_counters(
                    entry["user_id"],
                    entry["actual_followers"],
                    entry["actual_following"],
                )
                self.logger.warning(
                    f"Follow counters drifted for user {entry['user_id']}: "
                    f"followers {entry['follower_count']} -> {entry['actual_followers']}, "
                    f"following {entry['following_count']} -> {entry['actual_following']}"
                )

            await self.db.commit()
            return drift

        except Exception as error:
            await self._handle_service_error(error, "reconcile follow counters")
