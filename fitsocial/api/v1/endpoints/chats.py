"""
Chat API endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from fitsocial.dependencies import (
    PaginationParams,
    get_chat_service,
    get_current_user,
    get_pagination_params,
)
from fitsocial.models.user import User
from fitsocial.schemas.chats import (
    ChatCreateRequest,
    ChatResponse,
    MarkReadResponse,
    MessageCreateRequest,
    MessageResponse,
)
from fitsocial.schemas.common import ERROR_RESPONSES, SuccessResponse, UserSummary
from fitsocial.services.chat_service import ChatService

router = APIRouter(prefix="/chats", tags=["Chats"], responses=ERROR_RESPONSES)


def _chat_response(chat, other_user, unread_count: int = 0) -> ChatResponse:
    return ChatResponse(
        id=chat.id,
        creation_reason=chat.creation_reason,
        last_message_at=chat.last_message_at,
        last_message_preview=chat.last_message_preview,
        is_active=chat.is_active,
        other_user=UserSummary.model_validate(other_user) if other_user else None,
        unread_count=unread_count,
    )


@router.post("", response_model=ChatResponse, summary="Open or fetch a chat with a user")
async def create_or_get_chat(
    request: ChatCreateRequest,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    chat = await chat_service.create_or_get_chat(
        current_user.id, request.other_user_id, request.reason
    )
    other = next(
        (member.user for member in chat.members if member.user_id != current_user.id),
        None,
    )
    return _chat_response(chat, other)


@router.get("", response_model=List[ChatResponse], summary="My chats")
async def list_chats(
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> List[ChatResponse]:
    chats = await chat_service.list_chats(
        current_user.id, skip=pagination.skip, limit=pagination.limit
    )
    return [
        _chat_response(row["chat"], row["other_user"], row["unread_count"])
        for row in chats
    ]


@router.get(
    "/{chat_id}/messages", response_model=List[MessageResponse], summary="Chat messages"
)
async def list_messages(
    chat_id: int,
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> List[MessageResponse]:
    messages = await chat_service.list_messages(
        current_user.id, chat_id, skip=pagination.skip, limit=pagination.limit
    )
    return [MessageResponse.model_validate(message) for message in messages]


@router.post(
    "/{chat_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
)
async def send_message(
    chat_id: int,
    request: MessageCreateRequest,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> MessageResponse:
    message = await chat_service.send_message(current_user.id, chat_id, request.content)
    return MessageResponse.model_validate(message)


@router.post("/{chat_id}/read", response_model=MarkReadResponse, summary="Mark chat read")
async def mark_read(
    chat_id: int,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> MarkReadResponse:
    return MarkReadResponse(marked=await chat_service.mark_read(current_user.id, chat_id))


@router.delete(
    "/messages/{message_id}", response_model=SuccessResponse, summary="Delete a message"
)
async def delete_message(
    message_id: int,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> SuccessResponse:
    await chat_service.delete_message(current_user.id, message_id)
    return SuccessResponse(message="Message deleted")
