"""
User Repository - Specialized data access for the User model.

This provides:
1. Lookups by identity-provider subject and username
2. User search
3. Atomic counter adjustments used by the social graph
4. Counter recount against the follow_edges table
"""

from typing import Dict, List, Optional

from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.models.social import FollowEdge
from fitsocial.models.user import User, UserKind
from fitsocial.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User-specific repository extending BaseRepository."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_external_id(self, external_id: str) -> Optional[User]:
        """
        Get user by identity-provider subject.

        Args:
            external_id: Stable identity key issued by the identity provider

        Returns:
            User instance or None if not found
        """
        result = await self.db.execute(
            select(User).where(User.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def username_exists(self, username: str) -> bool:
        result = await self.db.execute(select(User.id).where(User.username == username))
        return result.first() is not None

    async def search_users(
        self,
        query: str,
        skip: int = 0,
        limit: int = 20,
        kind: Optional[UserKind] = None,
    ) -> List[User]:
        """
        Search active users by username or email.

        Args:
            query: Search term
            kind: Only users tagged with this kind
            skip: Pagination offset
            limit: Maximum results

        Returns:
            List of matching users
        """
        search_term = f"%{query.lower()}%"
        conditions = [
            User.is_active.is_(True),
            or_(
                func.lower(User.username).like(search_term),
                func.lower(User.email).like(search_term),
            ),
        ]
        if kind is not None:
            conditions.append(User.kind == kind)

        result = await self.db.execute(
            select(User)
            .where(and_(*conditions))
            .order_by(User.follower_count.desc(), User.id)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def adjust_follow_counters(
        self,
        user_id: int,
        follower_delta: int = 0,
        following_delta: int = 0,
    ) -> bool:
        """
        Apply counter deltas inside the database, clamping at zero.

        The arithmetic runs in SQL so concurrent adjustments never lose
        updates to a read-modify-write race.

        Args:
            user_id: User whose counters change
            follower_delta: Change applied to follower_count
            following_delta: Change applied to following_count

        Returns:
            True if the user row exists and was updated
        """
        values = {}
        if follower_delta:
            values["follower_count"] = _clamped(User.follower_count, follower_delta)
        if following_delta:
            values["following_count"] = _clamped(User.following_count, following_delta)
        if not values:
            return False

        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(**values)
            .returning(User.id)
            .execution_options(synchronize_session="fetch")
        )
        return result.first() is not None

    async def find_counter_drift(
        self, user_id: Optional[int] = None
    ) -> List[Dict[str, int]]:
        """
        Compare cached counters against the follow_edges table.

        Returns:
            One entry per drifted user with stored and actual counts
        """
        followers = (
            select(func.count(FollowEdge.id))
            .where(FollowEdge.following_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        following = (
            select(func.count(FollowEdge.id))
            .where(FollowEdge.follower_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )

        query = select(
            User.id,
            User.follower_count,
            User.following_count,
            followers.label("actual_followers"),
            following.label("actual_following"),
        )
        if user_id is not None:
            query = query.where(User.id == user_id)

        result = await self.db.execute(query.order_by(User.id))

        drift = []
        for row in result.all():
            if (
                row.follower_count != row.actual_followers
                or row.following_count != row.actual_following
            ):
                drift.append(
                    {
                        "user_id": row.id,
                        "follower_count": row.follower_count,
                        "following_count": row.following_count,
                        "actual_followers": row.actual_followers,
                        "actual_following": row.actual_following,
                    }
                )
        return drift

    async def set_follow_counters(
        self, user_id: int, follower_count: int, following_count: int
    ) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(follower_count=follower_count, following_count=following_count)
            .execution_options(synchronize_session="fetch")
        )


def _clamped(column, delta: int):
    """SQL expression for max(0, column + delta)."""
    return case((column + delta < 0, 0), else_=column + delta)
