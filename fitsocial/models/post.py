"""
Content models - posts, likes and comments.

like_count and comment_count on Post are cached aggregates of the likes and
comments tables, updated in the same transaction as the row they count.
"""

from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy import UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitsocial.database import Base

if TYPE_CHECKING:
    from fitsocial.models.user import User


class PostPrivacy(str, Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class Post(Base):
    __tablename__ = "posts"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    content: Mapped[Optional[str]] = mapped_column(Text)

    # Media lives on the external media host; only the reference is stored
    media_url: Mapped[Optional[str]] = mapped_column(String(1000))
    media_public_id: Mapped[Optional[str]] = mapped_column(String(255))
    media_type: Mapped[Optional[MediaType]] = mapped_column(
        SQLEnum(MediaType, name="media_type")
    )

    privacy: Mapped[PostPrivacy] = mapped_column(
        SQLEnum(PostPrivacy, name="post_privacy"), default=PostPrivacy.PUBLIC
    )
    tags: Mapped[Optional[List[str]]] = mapped_column(JSON)

    like_count: Mapped[int] = mapped_column(Integer, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, default=0)

    author: Mapped["User"] = relationship("User")

    __table_args__ = (
        Index("idx_post_privacy_created", "privacy", "created_at"),
        Index("idx_post_user_privacy", "user_id", "privacy"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, user_id={self.user_id}, privacy='{self.privacy}')>"


class Like(Base):
    __tablename__ = "likes"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id"), index=True)

    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_like_user_post"),)


class Comment(Base):
    __tablename__ = "comments"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id"))
    content: Mapped[str] = mapped_column(Text)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)

    author: Mapped["User"] = relationship("User")

    __table_args__ = (Index("idx_comment_post_created", "post_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, post_id={self.post_id}, user_id={self.user_id})>"
