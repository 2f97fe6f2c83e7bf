"""
Social graph API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from fitsocial.core.security import require_admin
from fitsocial.dependencies import (
    PaginationParams,
    get_current_user,
    get_pagination_params,
    get_social_service,
)
from fitsocial.models.user import User
from fitsocial.schemas.common import ERROR_RESPONSES, UserSummary
from fitsocial.schemas.social import (
    FollowActionResponse,
    FollowReconcileResponse,
    FollowStatusResponse,
    UserListResponse,
)
from fitsocial.services.social_service import SocialService

router = APIRouter(prefix="/social", tags=["Social"], responses=ERROR_RESPONSES)


@router.post(
    "/follow/{user_id}",
    response_model=FollowActionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Follow a user",
)
async def follow_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> FollowActionResponse:
    await social_service.follow(current_user.id, user_id)
    return FollowActionResponse(following=True)


@router.delete(
    "/follow/{user_id}", response_model=FollowActionResponse, summary="Unfollow a user"
)
async def unfollow_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> FollowActionResponse:
    await social_service.unfollow(current_user.id, user_id)
    return FollowActionResponse(following=False)


@router.get(
    "/{user_id}/status",
    response_model=FollowStatusResponse,
    summary="Follow relationship between the caller and a user",
)
async def follow_status(
    user_id: int,
    current_user: User = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> FollowStatusResponse:
    return FollowStatusResponse(
        **await social_service.get_follow_status(current_user.id, user_id)
    )


@router.get("/{user_id}/followers", response_model=UserListResponse, summary="Followers")
async def list_followers(
    user_id: int,
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: User = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> UserListResponse:
    users = await social_service.list_followers(
        user_id, skip=pagination.skip, limit=pagination.limit
    )
    return UserListResponse(
        users=[UserSummary.model_validate(user) for user in users],
        skip=pagination.skip,
        limit=pagination.limit,
    )


@router.get("/{user_id}/following", response_model=UserListResponse, summary="Following")
async def list_following(
    user_id: int,
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: User = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> UserListResponse:
    users = await social_service.list_following(
        user_id, skip=pagination.skip, limit=pagination.limit
    )
    return UserListResponse(
        users=[UserSummary.model_validate(user) for user in users],
        skip=pagination.skip,
        limit=pagination.limit,
    )


@router.post(
    "/reconcile",
    response_model=FollowReconcileResponse,
    summary="Recount follow counters",
    description="Admin only. Rewrites follower/following counters that drifted from the edge table",
    dependencies=[Depends(require_admin)],
)
async def reconcile_follow_counters(
    user_id: Optional[int] = Query(None),
    social_service: SocialService = Depends(get_social_service),
) -> FollowReconcileResponse:
    corrections = await social_service.reconcile_follow_counters(user_id)
    return FollowReconcileResponse(corrected=len(corrections), corrections=corrections)
