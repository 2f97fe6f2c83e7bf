"""
Follow Repository - Data access for directed follow edges.
"""

from typing import List

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.models.social import FollowEdge
from fitsocial.models.user import User
from fitsocial.repositories.base import BaseRepository


class FollowRepository(BaseRepository[FollowEdge]):
    def __init__(self, db: AsyncSession):
        super().__init__(FollowEdge, db)

    async def is_following(self, follower_id: int, following_id: int) -> bool:
        """
        Check if one user follows another.

        Served by the unique (follower_id, following_id) index.
        """
        result = await self.db.execute(
            select(FollowEdge.id).where(
                and_(
                    FollowEdge.follower_id == follower_id,
                    FollowEdge.following_id == following_id,
                )
            )
        )
        return result.first() is not None

    async def insert_edge(self, follower_id: int, following_id: int) -> FollowEdge:
        """
        Insert an edge and flush immediately.

        Raises:
            sqlalchemy.exc.IntegrityError: when the pair already exists
        """
        edge = FollowEdge(follower_id=follower_id, following_id=following_id)
        self.db.add(edge)
        await self.db.flush()
        return edge

    async def delete_edge(self, follower_id: int, following_id: int) -> bool:
        """
        Delete an edge by its key.

        Returns:
            True only if this call removed the row
        """
        result = await self.db.execute(
            delete(FollowEdge)
            .where(
                and_(
                    FollowEdge.follower_id == follower_id,
                    FollowEdge.following_id == following_id,
                )
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def get_followers(
        self, user_id: int, skip: int = 0, limit: int = 50
    ) -> List[User]:
        """Users who follow user_id, most recent first."""
        result = await self.db.execute(
            select(User)
            .join(FollowEdge, FollowEdge.follower_id == User.id)
            .where(FollowEdge.following_id == user_id)
            .order_by(FollowEdge.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_following(
        self, user_id: int, skip: int = 0, limit: int = 50
    ) -> List[User]:
        """Users that user_id follows, most recent first."""
        result = await self.db.execute(
            select(User)
            .join(FollowEdge, FollowEdge.following_id == User.id)
            .where(FollowEdge.follower_id == user_id)
            .order_by(FollowEdge.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())
