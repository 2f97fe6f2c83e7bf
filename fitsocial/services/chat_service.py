"""
Chat Service - Two-person chats and messages.

Only members of a chat can read or write it. The chat row caches the
timestamp and a short preview of its latest message for the chat list.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.config import settings
from fitsocial.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from fitsocial.models.chat import Chat, ChatCreationReason, Message
from fitsocial.repositories.chat_repository import ChatRepository
from fitsocial.repositories.user_repository import UserRepository
from fitsocial.services.base import BaseService


class ChatService(BaseService):
    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.chat_repo = ChatRepository(db)
        self.user_repo = UserRepository(db)

    async def create_or_get_chat(
        self, user_id: int, other_user_id: int, reason: Any
    ) -> Chat:
        """
        Return the pair's chat, creating it on first contact.

        Raises:
            ValidationError: Self-chat or unknown reason
            NotFoundError: Unknown other user
        """
        self._log_operation(
            "create_or_get_chat", user_id=user_id, other_user_id=other_user_id
        )

        if user_id == other_user_id:
            raise ValidationError("Cannot create chat with yourself")
        try:
            reason = ChatCreationReason(reason)
        except ValueError:
            raise ValidationError(f"Unknown chat creation reason: {reason}")

        try:
            if not await self.user_repo.exists(other_user_id):
                raise NotFoundError("User not found")

            chat = await self.ensure_chat(user_id, other_user_id, reason)
            await self.db.commit()
            return chat

        except Exception as error:
            await self._handle_service_error(error, "create chat")

    async def ensure_chat(
        self, user_id: int, other_user_id: int, reason: ChatCreationReason
    ) -> Chat:
        """Find or stage the pair's chat inside the caller's transaction."""
        chat = await self.chat_repo.find_between(user_id, other_user_id)
        if chat:
            return chat

        chat = await self.chat_repo.create_chat(
            [user_id, other_user_id], reason, datetime.now(timezone.utc)
        )
        self.logger.info(f"Created chat {chat.id} between {user_id} and {other_user_id}")
        return chat

    async def post_system_message(
        self, chat: Chat, sender_id: int, content: str, preview: str
    ) -> Message:
        """Stage a system message; nobody has read it yet."""
        message = await self.chat_repo.add_message(
            chat.id, sender_id, content, is_system_message=True
        )
        message.read_by = []
        chat.last_message_at = datetime.now(timezone.utc)
        chat.last_message_preview = preview
        await self.db.flush()
        return message

    async def list_chats(
        self, user_id: int, skip: int = 0, limit: int = 20
    ) -> List[Dict[str, Any]]:
        """
        Chats of the user, newest activity first.

        Returns:
            [{"chat": Chat, "other_user": User or None, "unread_count": int}]
        """
        chats = await self.chat_repo.get_user_chats(user_id, skip=skip, limit=limit)

        results = []
        for chat in chats:
            other = next(
                (member.user for member in chat.members if member.user_id != user_id),
                None,
            )
            messages = await self.chat_repo.get_all_messages(chat.id)
            unread = sum(
                1
                for message in messages
                if message.sender_id != user_id and user_id not in (message.read_by or [])
            )
            results.append({"chat": chat, "other_user": other, "unread_count": unread})
        return results

    async def list_messages(
        self, user_id: int, chat_id: int, skip: int = 0, limit: int = 20
    ) -> List[Message]:
        """Newest-first window of a chat's messages; members only."""
        await self._require_member(chat_id, user_id)
        return await self.chat_repo.get_messages(chat_id, skip=skip, limit=limit)

    async def send_message(self, user_id: int, chat_id: int, content: str) -> Message:
        """
        Post a message and refresh the chat's preview.

        Raises:
            ValidationError: Blank content
            NotFoundError / AuthorizationError: Unknown chat or non-member
        """
        self._log_operation("send_message", user_id=user_id, chat_id=chat_id)

        content = (content or "").strip()
        if not content:
            raise ValidationError("Message content cannot be empty")

        try:
            chat = await self._require_member(chat_id, user_id)

            message = await self.chat_repo.add_message(chat_id, user_id, content)
            chat.last_message_at = datetime.now(timezone.utc)
            chat.last_message_preview = content[: settings.message_preview_length]

            await self.db.commit()
            return message

        except Exception as error:
            await self._handle_service_error(error, "send message")

    async def mark_read(self, user_id: int, chat_id: int) -> int:
        """
        Add the user to read_by on every message they have not read.

        Returns:
            Number of messages newly marked
        """
        try:
            await self._require_member(chat_id, user_id)

            marked = 0
            for message in await self.chat_repo.get_all_messages(chat_id):
                read_by = list(message.read_by or [])
                if message.sender_id == user_id or user_id in read_by:
                    continue
                # JSON columns are replaced, not mutated in place
                message.read_by = read_by + [user_id]
                marked += 1

            await self.db.commit()
            return marked

        except Exception as error:
            await self._handle_service_error(error, "mark messages read")

    async def delete_message(self, user_id: int, message_id: int) -> bool:
        """Soft delete; only the sender may delete."""
        self._log_operation("delete_message", user_id=user_id, message_id=message_id)

        try:
            message = await self.chat_repo.get_message(message_id)
            if not message or message.is_deleted:
                raise NotFoundError("Message not found")
            if message.sender_id != user_id:
                raise AuthorizationError("Only the sender can delete this message")

            message.is_deleted = True
            await self.db.commit()
            return True

        except Exception as error:
            await self._handle_service_error(error, "delete message")

    async def _require_member(self, chat_id: int, user_id: int) -> Chat:
        chat = await self.chat_repo.get(chat_id)
        if not chat:
            raise NotFoundError("Chat not found")
        if not await self.chat_repo.is_member(chat_id, user_id):
            raise AuthorizationError("Not a member of this chat")
        return chat
