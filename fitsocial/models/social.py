"""
Social graph model - directed follow edges between users.
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitsocial.database import Base

if TYPE_CHECKING:
    from fitsocial.models.user import User


class FollowEdge(Base):
    """
    Directed follow relationship (follower -> following).

    Design decisions:
    - Unique (follower_id, following_id) makes duplicate follows impossible,
      even for concurrent requests
    - Check constraint rejects self-follows at the storage level
    - Separate indexes on each side for follower/following listings and
      counter recounts
    - Edges are inserted and deleted, never updated
    """

    __tablename__ = "follow_edges"

    follower_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    following_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    follower: Mapped["User"] = relationship("User", foreign_keys=[follower_id])
    following: Mapped["User"] = relationship("User", foreign_keys=[following_id])

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follow_edge"),
        CheckConstraint("follower_id <> following_id", name="ck_follow_not_self"),
        Index("idx_follow_follower", "follower_id"),
        Index("idx_follow_following", "following_id"),
    )

    def __repr__(self) -> str:
        return f"<FollowEdge(id={self.id}, follower_id={self.follower_id}, following_id={self.following_id})>"
