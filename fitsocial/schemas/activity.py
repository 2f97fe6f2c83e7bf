"""
Activity ledger and leaderboard schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from fitsocial.models.activity import ActivityKind
from fitsocial.schemas.common import UserSummary


class ActivityRecordRequest(BaseModel):
    """
    Record a scoring event.

    kind is checked by the service against the closed set of activity
    kinds, so an unknown kind surfaces as InvalidActivityKindError.
    """

    kind: str = Field(..., description="One of the activity kinds")
    points: int = Field(..., description="Signed point delta")
    description: str = Field("", max_length=500)
    related_id: Optional[str] = Field(None, max_length=255)
    metadata: Optional[Dict[str, Any]] = None
    user_id: Optional[int] = Field(
        None, description="Target user; admins only, defaults to the caller"
    )


class ActivityRecordedResponse(BaseModel):
    transaction_id: int


class ActivityTransactionResponse(BaseModel):
    id: int
    user_id: int
    activity_kind: ActivityKind
    points: int
    description: str = ""
    related_id: Optional[str] = None
    activity_metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ActivityFeedItem(BaseModel):
    transaction: ActivityTransactionResponse
    user: UserSummary


class ScoreCorrection(BaseModel):
    user_id: int
    stored_score: int
    replayed_score: int


class ScoreReconcileResponse(BaseModel):
    corrected: int
    corrections: List[ScoreCorrection]


class LeaderboardEntry(BaseModel):
    position: int
    user: UserSummary
    activity_score: int
    last_activity_update: Optional[datetime] = None


class LeaderboardResponse(BaseModel):
    entries: List[LeaderboardEntry]
    limit: int


class UserRankingResponse(BaseModel):
    user_id: int
    ranked: bool
    position: Optional[int] = None
    total_users: Optional[int] = None
    activity_score: Optional[int] = None
