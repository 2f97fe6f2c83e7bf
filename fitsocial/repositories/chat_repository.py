"""
Chat Repository - Data access for chats, memberships and messages.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fitsocial.models.chat import Chat, ChatCreationReason, ChatMember, Message
from fitsocial.repositories.base import BaseRepository


class ChatRepository(BaseRepository[Chat]):
    def __init__(self, db: AsyncSession):
        super().__init__(Chat, db)

    async def find_between(self, user_id: int, other_user_id: int) -> Optional[Chat]:
        """
        Find the chat whose members are exactly the two users.

        A chat qualifies when both users are members; chats only ever hold
        two members.
        """
        pair = (
            select(ChatMember.chat_id)
            .where(ChatMember.user_id.in_([user_id, other_user_id]))
            .group_by(ChatMember.chat_id)
            .having(func.count(func.distinct(ChatMember.user_id)) == 2)
        )
        result = await self.db.execute(
            select(Chat)
            .options(selectinload(Chat.members).selectinload(ChatMember.user))
            .where(Chat.id.in_(pair))
            .order_by(Chat.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_chat(
        self,
        member_ids: List[int],
        reason: ChatCreationReason,
        at: datetime,
    ) -> Chat:
        chat = Chat(creation_reason=reason, last_message_at=at, is_active=True)
        self.db.add(chat)
        await self.db.flush()

        for member_id in member_ids:
            self.db.add(ChatMember(chat_id=chat.id, user_id=member_id))
        await self.db.flush()

        return await self.get_with_members(chat.id)

    async def get_with_members(self, chat_id: int) -> Optional[Chat]:
        result = await self.db.execute(
            select(Chat)
            .options(selectinload(Chat.members).selectinload(ChatMember.user))
            .where(Chat.id == chat_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def is_member(self, chat_id: int, user_id: int) -> bool:
        result = await self.db.execute(
            select(ChatMember.id).where(
                and_(ChatMember.chat_id == chat_id, ChatMember.user_id == user_id)
            )
        )
        return result.first() is not None

    async def get_user_chats(
        self, user_id: int, skip: int = 0, limit: int = 20
    ) -> List[Chat]:
        """Active chats of a user, most recent activity first."""
        result = await self.db.execute(
            select(Chat)
            .options(selectinload(Chat.members).selectinload(ChatMember.user))
            .join(ChatMember, ChatMember.chat_id == Chat.id)
            .where(and_(ChatMember.user_id == user_id, Chat.is_active.is_(True)))
            .order_by(desc(Chat.last_message_at), desc(Chat.id))
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().unique().all())

    # Messages

    async def add_message(
        self,
        chat_id: int,
        sender_id: int,
        content: str,
        is_system_message: bool = False,
    ) -> Message:
        message = Message(
            chat_id=chat_id,
            sender_id=sender_id,
            content=content,
            read_by=[sender_id],
            is_system_message=is_system_message,
        )
        self.db.add(message)
        await self.db.flush()
        await self.db.refresh(message)
        return message

    async def get_message(self, message_id: int) -> Optional[Message]:
        result = await self.db.execute(select(Message).where(Message.id == message_id))
        return result.scalar_one_or_none()

    async def get_messages(
        self, chat_id: int, skip: int = 0, limit: int = 20
    ) -> List[Message]:
        """Non-deleted messages, newest first."""
        result = await self.db.execute(
            select(Message)
            .options(selectinload(Message.sender))
            .where(and_(Message.chat_id == chat_id, Message.is_deleted.is_(False)))
            .order_by(desc(Message.created_at), desc(Message.id))
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_all_messages(self, chat_id: int) -> List[Message]:
        result = await self.db.execute(
            select(Message)
            .where(and_(Message.chat_id == chat_id, Message.is_deleted.is_(False)))
            .order_by(Message.id)
        )
        return list(result.scalars().all())
