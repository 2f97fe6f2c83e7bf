"""
Training request schemas.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from fitsocial.models.training import TrainingRequestStatus
from fitsocial.schemas.common import UserSummary


class TrainingRequestCreate(BaseModel):
    trainer_id: int
    message: Optional[str] = Field(None, max_length=1000)


class TrainingRequestStatusUpdate(BaseModel):
    status: Literal["accepted", "rejected"]


class TrainingRequestResponse(BaseModel):
    id: int
    requester_id: int
    trainer_id: int
    status: TrainingRequestStatus
    message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReceivedTrainingRequest(TrainingRequestResponse):
    requester: Optional[UserSummary] = None


class SentTrainingRequest(TrainingRequestResponse):
    trainer: Optional[UserSummary] = None
