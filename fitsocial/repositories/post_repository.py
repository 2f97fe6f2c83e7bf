"""
Post Repository - Data access for posts, likes and comments.

This demonstrates:
1. Eager loading of authors for feed rendering
2. In-database counter arithmetic with a zero floor
3. Unique-constraint guarded like insertion
"""

from typing import List, Optional

from sqlalchemy import and_, case, delete, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fitsocial.models.post import Comment, Like, Post, PostPrivacy
from fitsocial.repositories.base import BaseRepository


class PostRepository(BaseRepository[Post]):
    def __init__(self, db: AsyncSession):
        super().__init__(Post, db)

    async def get_with_author(self, post_id: int) -> Optional[Post]:
        result = await self.db.execute(
            select(Post).options(selectinload(Post.author)).where(Post.id == post_id)
        )
        return result.scalar_one_or_none()

    async def get_public_feed(self, skip: int = 0, limit: int = 20) -> List[Post]:
        """Public posts, newest first."""
        result = await self.db.execute(
            select(Post)
            .options(selectinload(Post.author))
            .where(Post.privacy == PostPrivacy.PUBLIC)
            .order_by(desc(Post.created_at), desc(Post.id))
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_user(
        self, user_id: int, privacy: Optional[PostPrivacy] = None
    ) -> List[Post]:
        query = (
            select(Post)
            .options(selectinload(Post.author))
            .where(Post.user_id == user_id)
        )
        if privacy is not None:
            query = query.where(Post.privacy == privacy)

        result = await self.db.execute(
            query.order_by(desc(Post.created_at), desc(Post.id))
        )
        return list(result.scalars().all())

    async def delete_with_children(self, post_id: int) -> bool:
        """Remove a post together with its likes and comments."""
        await self.db.execute(delete(Like).where(Like.post_id == post_id))
        await self.db.execute(delete(Comment).where(Comment.post_id == post_id))
        result = await self.db.execute(
            delete(Post)
            .where(Post.id == post_id)
            .returning(Post.id)
            .execution_options(synchronize_session="fetch")
        )
        return result.first() is not None

    async def adjust_counter(self, post_id: int, column_name: str, delta: int) -> None:
        """Apply column = max(0, column + delta) for like_count or comment_count."""
        column = getattr(Post, column_name)
        new_value = column + delta
        await self.db.execute(
            update(Post)
            .where(Post.id == post_id)
            .values({column_name: case((new_value < 0, 0), else_=new_value)})
            .execution_options(synchronize_session="fetch")
        )

    # Likes

    async def insert_like(self, user_id: int, post_id: int) -> Like:
        """
        Raises:
            sqlalchemy.exc.IntegrityError: when the like already exists
        """
        like = Like(user_id=user_id, post_id=post_id)
        self.db.add(like)
        await self.db.flush()
        return like

    async def delete_like(self, user_id: int, post_id: int) -> bool:
        result = await self.db.execute(
            delete(Like)
            .where(and_(Like.user_id == user_id, Like.post_id == post_id))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    # Comments

    async def add_comment(self, user_id: int, post_id: int, content: str) -> Comment:
        comment = Comment(user_id=user_id, post_id=post_id, content=content)
        self.db.add(comment)
        await self.db.flush()
        await self.db.refresh(comment)
        return comment

    async def get_comment(self, comment_id: int) -> Optional[Comment]:
        result = await self.db.execute(select(Comment).where(Comment.id == comment_id))
        return result.scalar_one_or_none()

    async def get_comments(self, post_id: int, limit: int = 50) -> List[Comment]:
        """Visible comments of a post, newest first."""
        result = await self.db.execute(
            select(Comment)
            .options(selectinload(Comment.author))
            .where(and_(Comment.post_id == post_id, Comment.is_deleted.is_(False)))
            .order_by(desc(Comment.created_at), desc(Comment.id))
            .limit(limit)
        )
        return list(result.scalars().all())
