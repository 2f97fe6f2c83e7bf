"""
Chat and message schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from fitsocial.models.chat import ChatCreationReason
from fitsocial.schemas.common import UserSummary


class ChatCreateRequest(BaseModel):
    other_user_id: int
    reason: ChatCreationReason = ChatCreationReason.DIRECT_MESSAGE


class ChatResponse(BaseModel):
    id: int
    creation_reason: ChatCreationReason
    last_message_at: Optional[datetime] = None
    last_message_preview: Optional[str] = None
    is_active: bool = True
    other_user: Optional[UserSummary] = None
    unread_count: int = 0


class MessageCreateRequest(BaseModel):
    content: str = Field(..., max_length=5000)


class MessageResponse(BaseModel):
    id: int
    chat_id: int
    sender_id: int
    content: Optional[str] = None
    read_by: List[int] = Field(default_factory=list)
    is_edited: bool = False
    is_system_message: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MarkReadResponse(BaseModel):
    marked: int
