"""
Activity ledger and leaderboard API endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from fitsocial.config import settings
from fitsocial.core.exceptions import AuthorizationError
from fitsocial.core.security import require_admin
from fitsocial.dependencies import (
    get_activity_service,
    get_current_user,
    get_leaderboard_service,
    is_admin,
)
from fitsocial.models.activity import ActivityKind
from fitsocial.models.user import User
from fitsocial.schemas.activity import (
    ActivityFeedItem,
    ActivityRecordedResponse,
    ActivityRecordRequest,
    ActivityTransactionResponse,
    LeaderboardResponse,
    ScoreReconcileResponse,
    UserRankingResponse,
)
from fitsocial.schemas.common import ERROR_RESPONSES, UserSummary
from fitsocial.services.activity_service import ActivityService
from fitsocial.services.leaderboard_service import LeaderboardService

router = APIRouter(prefix="/activity", tags=["Activity"], responses=ERROR_RESPONSES)
leaderboard_router = APIRouter(
    prefix="/leaderboard", tags=["Leaderboard"], responses=ERROR_RESPONSES
)


@router.post(
    "",
    response_model=ActivityRecordedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record an activity",
    description=(
        "Appends a ledger entry for the caller. Recording for another user "
        "and manual adjustments require the admin role."
    ),
)
async def record_activity(
    request: ActivityRecordRequest,
    current_user: User = Depends(get_current_user),
    admin: bool = Depends(is_admin),
    activity_service: ActivityService = Depends(get_activity_service),
) -> ActivityRecordedResponse:
    target_id = request.user_id or current_user.id

    if not admin:
        if target_id != current_user.id:
            raise AuthorizationError("Only admins can record activity for other users")
        if request.kind == ActivityKind.MANUAL_ADJUSTMENT.value:
            raise AuthorizationError("Manual adjustments require the admin role")

    transaction_id = await activity_service.record_activity(
        user_id=target_id,
        kind=request.kind,
        points=request.points,
        description=request.description,
        related_id=request.related_id,
        metadata=request.metadata,
    )
    return ActivityRecordedResponse(transaction_id=transaction_id)


@router.get(
    "/me", response_model=List[ActivityTransactionResponse], summary="My activity history"
)
async def my_activity(
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    activity_service: ActivityService = Depends(get_activity_service),
) -> List[ActivityTransactionResponse]:
    history = await activity_service.get_activity_history(current_user.id, limit=limit)
    return [ActivityTransactionResponse.model_validate(item) for item in history]


@router.get("/feed", response_model=List[ActivityFeedItem], summary="Recent activity")
async def activity_feed(
    limit: int = Query(settings.activity_feed_default_limit, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    activity_service: ActivityService = Depends(get_activity_service),
) -> List[ActivityFeedItem]:
    feed = await activity_service.get_recent_activity_feed(limit=limit)
    return [
        ActivityFeedItem(
            transaction=ActivityTransactionResponse.model_validate(row["transaction"]),
            user=UserSummary.model_validate(row["user"]),
        )
        for row in feed
    ]


@router.post(
    "/reconcile",
    response_model=ScoreReconcileResponse,
    summary="Rebuild activity scores from the ledger",
    dependencies=[Depends(require_admin)],
)
async def reconcile_activity_scores(
    user_id: Optional[int] = Query(None),
    activity_service: ActivityService = Depends(get_activity_service),
) -> ScoreReconcileResponse:
    corrections = await activity_service.reconcile_activity_scores(user_id)
    return ScoreReconcileResponse(corrected=len(corrections), corrections=corrections)


@leaderboard_router.get("", response_model=LeaderboardResponse, summary="Top individuals")
async def get_leaderboard(
    limit: int = Query(
        settings.leaderboard_default_limit, ge=1, le=settings.leaderboard_max_limit
    ),
    current_user: User = Depends(get_current_user),
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    entries = await leaderboard_service.get_leaderboard(limit)
    return LeaderboardResponse(entries=entries, limit=limit)


@leaderboard_router.get(
    "/{user_id}", response_model=UserRankingResponse, summary="Rank of one user"
)
async def get_user_ranking(
    user_id: int,
    current_user: User = Depends(get_current_user),
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service),
) -> UserRankingResponse:
    ranking = await leaderboard_service.get_user_ranking(user_id)
    if ranking is None:
        return UserRankingResponse(user_id=user_id, ranked=False)
    return UserRankingResponse(user_id=user_id, ranked=True, **ranking)
