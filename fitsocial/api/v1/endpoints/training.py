"""
Training request API endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from fitsocial.dependencies import get_current_user, get_training_service
from fitsocial.models.training import TrainingRequestStatus
from fitsocial.models.user import User
from fitsocial.schemas.common import ERROR_RESPONSES
from fitsocial.schemas.training import (
    ReceivedTrainingRequest,
    SentTrainingRequest,
    TrainingRequestCreate,
    TrainingRequestResponse,
    TrainingRequestStatusUpdate,
)
from fitsocial.services.training_service import TrainingService

router = APIRouter(prefix="/training", tags=["Training"], responses=ERROR_RESPONSES)


@router.post(
    "/requests",
    response_model=TrainingRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Ask an individual to train you",
)
async def send_training_request(
    request: TrainingRequestCreate,
    current_user: User = Depends(get_current_user),
    training_service: TrainingService = Depends(get_training_service),
) -> TrainingRequestResponse:
    created = await training_service.send_training_request(
        current_user.id, request.trainer_id, request.message
    )
    return TrainingRequestResponse.model_validate(created)


@router.patch(
    "/requests/{request_id}",
    response_model=TrainingRequestResponse,
    summary="Accept or reject a request",
    description="Trainer only. Accepting opens a chat with the requester.",
)
async def update_training_request(
    request_id: int,
    update: TrainingRequestStatusUpdate,
    current_user: User = Depends(get_current_user),
    training_service: TrainingService = Depends(get_training_service),
) -> TrainingRequestResponse:
    updated = await training_service.update_training_request_status(
        request_id, update.status, actor_id=current_user.id
    )
    return TrainingRequestResponse.model_validate(updated)


@router.get("/requests/received", response_model=List[ReceivedTrainingRequest])
async def received_requests(
    status_filter: Optional[TrainingRequestStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    training_service: TrainingService = Depends(get_training_service),
) -> List[ReceivedTrainingRequest]:
    requests = await training_service.list_received_requests(current_user.id, status_filter)
    return [ReceivedTrainingRequest.model_validate(item) for item in requests]


@router.get("/requests/sent", response_model=List[SentTrainingRequest])
async def sent_requests(
    status_filter: Optional[TrainingRequestStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    training_service: TrainingService = Depends(get_training_service),
) -> List[SentTrainingRequest]:
    requests = await training_service.list_sent_requests(current_user.id, status_filter)
    return [SentTrainingRequest.model_validate(item) for item in requests]
