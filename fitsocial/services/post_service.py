"""
Post Service - Posts, likes and comments.

like_count and comment_count move in the same transaction as the like or
comment row, in SQL, floored at zero.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from fitsocial.models.post import Comment, MediaType, Post, PostPrivacy
from fitsocial.repositories.post_repository import PostRepository
from fitsocial.repositories.user_repository import UserRepository
from fitsocial.services.base import BaseService


def normalize_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Lower-case, strip leading '#', drop blanks and duplicates, keep order."""
    if not tags:
        return None
    seen = []
    for tag in tags:
        cleaned = (tag or "").strip().lstrip("#").lower()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen or None


class PostService(BaseService):
    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.post_repo = PostRepository(db)
        self.user_repo = UserRepository(db)

    async def create_post(
        self,
        user_id: int,
        content: Optional[str] = None,
        media_url: Optional[str] = None,
        media_type: Optional[Any] = None,
        privacy: Any = PostPrivacy.PUBLIC,
        tags: Optional[List[str]] = None,
        media_public_id: Optional[str] = None,
    ) -> Post:
        """
        Create a post with text, media or both.

        Raises:
            ValidationError: Neither content nor media given, or bad enums
            NotFoundError: Unknown author
        """
        self._log_operation("create_post", user_id=user_id)

        content = (content or "").strip() or None
        if not content and not media_url:
            raise ValidationError("Post must have content or media")

        try:
            privacy = PostPrivacy(privacy)
            media_type = MediaType(media_type) if media_type else None
        except ValueError as error:
            raise ValidationError(str(error))

        if media_url and media_type is None:
            media_type = MediaType.IMAGE

        try:
            if not await self.user_repo.exists(user_id):
                raise NotFoundError("User not found")

            post = await self.post_repo.create(
                {
                    "user_id": user_id,
                    "content": content,
                    "media_url": media_url,
                    "media_public_id": media_public_id,
                    "media_type": media_type,
                    "privacy": privacy,
                    "tags": normalize_tags(tags),
                    "like_count": 0,
                    "comment_count": 0,
                }
            )
            await self.db.commit()
            return await self.post_repo.get_with_author(post.id)

        except Exception as error:
            await self._handle_service_error(error, "create post")

    async def list_feed(self, skip: int = 0, limit: int = 20) -> List[Post]:
        """Public posts, newest first."""
        return await self.post_repo.get_public_feed(skip=skip, limit=limit)

    async def list_user_posts(
        self, user_id: int, privacy: Optional[Any] = None
    ) -> List[Post]:
        privacy = PostPrivacy(privacy) if privacy else None
        return await self.post_repo.get_by_user(user_id, privacy)

    async def delete_post(self, actor_id: int, post_id: int) -> bool:
        """
        Delete a post with its likes and comments; owner only.

        Raises:
            NotFoundError: Unknown post
            AuthorizationError: Actor is not the author
        """
        self._log_operation("delete_post", actor_id=actor_id, post_id=post_id)

        try:
            post = await self.post_repo.get(post_id)
            if not post:
                raise NotFoundError("Post not found")
            if post.user_id != actor_id:
                raise AuthorizationError("Not authorized to delete this post")

            await self.post_repo.delete_with_children(post_id)
            await self.db.commit()
            return True

        except Exception as error:
            await self._handle_service_error(error, "delete post")

    async def toggle_like(self, user_id: int, post_id: int) -> Dict[str, Any]:
        """
        Like the post if not liked, unlike it otherwise.

        Returns:
            {"liked": bool, "like_count": int}
        """
        self._log_operation("toggle_like", user_id=user_id, post_id=post_id)

        try:
            if not await self.post_repo.exists(post_id):
                raise NotFoundError("Post not found")

            if await self.post_repo.delete_like(user_id, post_id):
                liked = False
                await self.post_repo.adjust_counter(post_id, "like_count", -1)
            else:
                await self.post_repo.insert_like(user_id, post_id)
                liked = True
                await self.post_repo.adjust_counter(post_id, "like_count", 1)

            await self.db.commit()

        except IntegrityError:
            # A concurrent like won; the post is liked either way
            await self.db.rollback()
            liked = True
        except Exception as error:
            await self._handle_service_error(error, "toggle like")

        post = await self.post_repo.get(post_id)
        if post is None:
            # The post went away under the like (foreign-key violation)
            raise NotFoundError("Post not found")
        return {"liked": liked, "like_count": post.like_count}

    async def create_comment(self, user_id: int, post_id: int, content: str) -> Comment:
        self._log_operation("create_comment", user_id=user_id, post_id=post_id)

        content = (content or "").strip()
        if not content:
            raise ValidationError("Comment cannot be empty")

        try:
            if not await self.post_repo.exists(post_id):
                raise NotFoundError("Post not found")

            comment = await self.post_repo.add_comment(user_id, post_id, content)
            await self.post_repo.adjust_counter(post_id, "comment_count", 1)

            await self.db.commit()
            await self.db.refresh(comment, attribute_names=["author"])
            return comment

        except Exception as error:
            await self._handle_service_error(error, "create comment")

    async def list_comments(self, post_id: int, limit: int = 50) -> List[Comment]:
        return await self.post_repo.get_comments(post_id, limit=limit)

    async def delete_comment(self, actor_id: int, comment_id: int) -> bool:
        """Soft-delete a comment; only its author may."""
        self._log_operation("delete_comment", actor_id=actor_id, comment_id=comment_id)

        try:
            comment = await self.post_repo.get_comment(comment_id)
            if not comment or comment.is_deleted:
                raise NotFoundError("Comment not found")
            if comment.user_id != actor_id:
                raise AuthorizationError("Not authorized to delete this comment")

            comment.is_deleted = True
            await self.post_repo.adjust_counter(comment.post_id, "comment_count", -1)

            await self.db.commit()
            return True

        except Exception as error:
            await self._handle_service_error(error, "delete comment")
