"""
Integration tests for chats and messages.
"""

import pytest

from fitsocial.config import settings
from fitsocial.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from fitsocial.models.chat import Chat, ChatCreationReason
from fitsocial.services.chat_service import ChatService


@pytest.mark.integration
class TestChats:
    @pytest.fixture
    async def trio(self, factory):
        ann = await factory.individual("ann")
        ben = await factory.individual("ben")
        cat = await factory.gym("cat")
        return ann.id, ben.id, cat.id

    @pytest.fixture
    async def chat_id(self, db_session, trio):
        ann_id, ben_id, _ = trio
        chat = await ChatService(db_session).create_or_get_chat(
            ann_id, ben_id, "direct_message"
        )
        return chat.id

    @pytest.mark.asyncio
    async def test_pair_shares_one_chat(self, db_session, trio, chat_id):
        ann_id, ben_id, _ = trio
        service = ChatService(db_session)

        again = await service.create_or_get_chat(ben_id, ann_id, "mutual_follow")

        assert again.id == chat_id
        assert again.creation_reason == ChatCreationReason.DIRECT_MESSAGE
        assert {member.user_id for member in again.members} == {ann_id, ben_id}

    @pytest.mark.asyncio
    async def test_chat_with_self_or_stranger(self, db_session, trio):
        ann_id, _, _ = trio
        service = ChatService(db_session)

        with pytest.raises(ValidationError):
            await service.create_or_get_chat(ann_id, ann_id, "direct_message")
        with pytest.raises(ValidationError):
            await service.create_or_get_chat(ann_id, 9999, "carrier_pigeon")
        with pytest.raises(NotFoundError):
            await service.create_or_get_chat(ann_id, 9999, "direct_message")

    @pytest.mark.asyncio
    async def test_send_updates_preview(self, db_session, trio, chat_id):
        ann_id, _, _ = trio
        long_text = "x" * 80

        message = await ChatService(db_session).send_message(ann_id, chat_id, long_text)

        assert message.read_by == [ann_id]
        chat = await db_session.get(Chat, chat_id)
        await db_session.refresh(chat)
        assert chat.last_message_preview == "x" * settings.message_preview_length

    @pytest.mark.asyncio
    async def test_blank_message(self, db_session, trio, chat_id):
        ann_id, _, _ = trio

        with pytest.raises(ValidationError):
            await ChatService(db_session).send_message(ann_id, chat_id, "   ")

    @pytest.mark.asyncio
    async def test_non_member_is_locked_out(self, db_session, trio, chat_id):
        _, _, cat_id = trio
        service = ChatService(db_session)

        with pytest.raises(AuthorizationError):
            await service.send_message(cat_id, chat_id, "hello?")
        with pytest.raises(AuthorizationError):
            await service.list_messages(cat_id, chat_id)
        with pytest.raises(NotFoundError):
            await service.list_messages(cat_id, 9999)

    @pytest.mark.asyncio
    async def test_unread_counts_and_mark_read(self, db_session, trio, chat_id):
        ann_id, ben_id, _ = trio
        service = ChatService(db_session)
        await service.send_message(ann_id, chat_id, "morning run?")
        await service.send_message(ann_id, chat_id, "6am")
        await service.send_message(ben_id, chat_id, "sure")

        listing = await service.list_chats(ben_id)
        assert len(listing) == 1
        assert listing[0]["other_user"].id == ann_id
        assert listing[0]["unread_count"] == 2

        assert await service.mark_read(ben_id, chat_id) == 2
        assert await service.mark_read(ben_id, chat_id) == 0
        assert (await service.list_chats(ben_id))[0]["unread_count"] == 0
        assert (await service.list_chats(ann_id))[0]["unread_count"] == 1

    @pytest.mark.asyncio
    async def test_messages_newest_first(self, db_session, trio, chat_id):
        ann_id, ben_id, _ = trio
        service = ChatService(db_session)
        await service.send_message(ann_id, chat_id, "one")
        await service.send_message(ben_id, chat_id, "two")

        messages = await service.list_messages(ann_id, chat_id)

        assert [message.content for message in messages] == ["two", "one"]

    @pytest.mark.asyncio
    async def test_only_sender_deletes(self, db_session, trio, chat_id):
        ann_id, ben_id, _ = trio
        service = ChatService(db_session)
        message = await service.send_message(ann_id, chat_id, "typo")
        message_id = message.id

        with pytest.raises(AuthorizationError):
            await service.delete_message(ben_id, message_id)

        assert await service.delete_message(ann_id, message_id) is True
        assert await service.list_messages(ben_id, chat_id) == []

        with pytest.raises(NotFoundError):
            await service.delete_message(ann_id, message_id)
