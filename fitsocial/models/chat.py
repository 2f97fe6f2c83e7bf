"""
Messaging models - two-person chats and their messages.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy import UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitsocial.database import Base

if TYPE_CHECKING:
    from fitsocial.models.user import User


class ChatCreationReason(str, Enum):
    TRAIN_REQUEST = "train_request"
    MUTUAL_FOLLOW = "mutual_follow"
    DIRECT_MESSAGE = "direct_message"


class Chat(Base):
    __tablename__ = "chats"

    creation_reason: Mapped[ChatCreationReason] = mapped_column(
        SQLEnum(ChatCreationReason, name="chat_creation_reason")
    )
    last_message_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    last_message_preview: Mapped[Optional[str]] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    members: Mapped[List["ChatMember"]] = relationship(
        "ChatMember", back_populates="chat", cascade="all, delete-orphan"
    )


class ChatMember(Base):
    __tablename__ = "chat_members"

    chat_id: Mapped[int] = mapped_column(ForeignKey("chats.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    chat: Mapped["Chat"] = relationship("Chat", back_populates="members")
    user: Mapped["User"] = relationship("User")

    __table_args__ = (UniqueConstraint("chat_id", "user_id", name="uq_chat_member"),)


class Message(Base):
    __tablename__ = "messages"

    chat_id: Mapped[int] = mapped_column(ForeignKey("chats.id"))
    sender_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    content: Mapped[Optional[str]] = mapped_column(Text)
    read_by: Mapped[List[int]] = mapped_column(JSON, default=list)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    is_edited: Mapped[bool] = mapped_column(Boolean, default=False)
    is_system_message: Mapped[bool] = mapped_column(Boolean, default=False)

    sender: Mapped["User"] = relationship("User")

    __table_args__ = (Index("idx_message_chat_created", "chat_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, chat_id={self.chat_id}, sender_id={self.sender_id})>"
