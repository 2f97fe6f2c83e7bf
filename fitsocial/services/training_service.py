"""
Training Service - Requests from athletes to individual trainers.

Lifecycle: pending -> accepted | rejected. Acceptance opens (or reuses) a
chat between the two users and posts a system message into it.
"""

from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.core.exceptions import (
    AlreadyRequestedError,
    AuthorizationError,
    NotATrainerError,
    NotFoundError,
    RequestNotPendingError,
    SelfRequestError,
    TrainingNotOfferedError,
    ValidationError,
)
from fitsocial.models.chat import ChatCreationReason
from fitsocial.models.training import TrainingRequest, TrainingRequestStatus
from fitsocial.models.user import UserKind
from fitsocial.repositories.profile_repository import ProfileRepository
from fitsocial.repositories.training_repository import TrainingRequestRepository
from fitsocial.repositories.user_repository import UserRepository
from fitsocial.services.base import BaseService
from fitsocial.services.chat_service import ChatService

TERMINAL_STATUSES = (TrainingRequestStatus.ACCEPTED, TrainingRequestStatus.REJECTED)


class TrainingService(BaseService):
    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.user_repo = UserRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.training_repo = TrainingRequestRepository(db)
        self.chat_service = ChatService(db)

    async def send_training_request(
        self, requester_id: int, trainer_id: int, message: Optional[str] = None
    ) -> TrainingRequest:
        """
        Create a pending request.

        Raises:
            SelfRequestError: requester_id == trainer_id
            NotFoundError: Unknown requester or trainer
            NotATrainerError: Trainer is not an individual with a profile
            TrainingNotOfferedError: Trainer has training disabled
            AlreadyRequestedError: A request for the pair already exists
        """
        self._log_operation(
            "send_training_request", requester_id=requester_id, trainer_id=trainer_id
        )

        if requester_id == trainer_id:
            raise SelfRequestError()

        try:
            if not await self.user_repo.exists(requester_id):
                raise NotFoundError("Requester not found")

            trainer = await self.user_repo.get(trainer_id)
            if not trainer:
                raise NotFoundError("Trainer not found")
            if trainer.kind != UserKind.INDIVIDUAL:
                raise NotATrainerError()

            profile = await self.profile_repo.get_by_user(UserKind.INDIVIDUAL, trainer_id)
            if not profile:
                raise NotATrainerError()
            if not profile.is_training_enabled:
                raise TrainingNotOfferedError()

            if await self.training_repo.get_for_pair(requester_id, trainer_id):
                raise AlreadyRequestedError()

            request = await self.training_repo.create(
                {
                    "requester_id": requester_id,
                    "trainer_id": trainer_id,
                    "status": TrainingRequestStatus.PENDING,
                    "message": message or "",
                }
            )
            await self.db.commit()
            return request

        except IntegrityError:
            await self.db.rollback()
            raise AlreadyRequestedError()
        except Exception as error:
            await self._handle_service_error(error, "send training request")

    async def update_training_request_status(
        self, request_id: int, status: Any, actor_id: Optional[int] = None
    ) -> TrainingRequest:
        """
        Accept or reject a pending request.

        Args:
            request_id: Request to transition
            status: accepted or rejected
            actor_id: When given, must be the trainer

        Raises:
            ValidationError: Status is not a terminal status
            NotFoundError: Unknown request
            AuthorizationError: Actor is not the trainer
            RequestNotPendingError: Request already decided
        """
        self._log_operation(
            "update_training_request_status", request_id=request_id, status=status
        )

        try:
            status = TrainingRequestStatus(status)
        except ValueError:
            status = None
        if status not in TERMINAL_STATUSES:
            raise ValidationError("Status must be 'accepted' or 'rejected'")

        try:
            request = await self.training_repo.get_with_users(request_id)
            if not request:
                raise NotFoundError("Training request not found")
            if actor_id is not None and actor_id != request.trainer_id:
                raise AuthorizationError("Only the trainer can answer this request")
            if request.status != TrainingRequestStatus.PENDING:
                raise RequestNotPendingError(request.status.value)

            request.status = status

            if status == TrainingRequestStatus.ACCEPTED:
                chat = await self.chat_service.ensure_chat(
                    request.requester_id,
                    request.trainer_id,
                    ChatCreationReason.TRAIN_REQUEST,
                )
                await self.chat_service.post_system_message(
                    chat,
                    sender_id=request.trainer_id,
                    content=(
                        f"You and @{request.requester.username} "
                        f"have agreed to train together!"
                    ),
                    preview="Training partnership started",
                )

            await self.db.commit()
            return request

        except Exception as error:
            await self._handle_service_error(error, "update training request")

    async def list_received_requests(
        self, trainer_id: int, status: Optional[Any] = None
    ) -> List[TrainingRequest]:
        status = TrainingRequestStatus(status) if status else None
        return await self.training_repo.list_received(trainer_id, status)

    async def list_sent_requests(
        self, requester_id: int, status: Optional[Any] = None
    ) -> List[TrainingRequest]:
        status = TrainingRequestStatus(status) if status else None
        return await self.training_repo.list_sent(requester_id, status)
