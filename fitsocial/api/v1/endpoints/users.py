"""
User and profile API endpoints.

This provides:
1. Current user and onboarding
2. User lookup and search
3. Profile creation, partial update and trainer discovery
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from fitsocial.dependencies import (
    PaginationParams,
    get_current_user,
    get_pagination_params,
    get_profile_service,
    get_user_service,
)
from fitsocial.models.user import User, UserKind
from fitsocial.schemas.common import ERROR_RESPONSES, SuccessResponse
from fitsocial.schemas.profiles import (
    ProfileCreatedResponse,
    IndividualProfileResponse,
    ProfileCreateRequest,
    TrainerResponse,
    profile_payload,
    serialize_profile,
)
from fitsocial.schemas.users import (
    OnboardingRequest,
    UserResponse,
    UserWithProfileResponse,
)
from fitsocial.services.profile_service import ProfileService
from fitsocial.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"], responses=ERROR_RESPONSES)
profiles_router = APIRouter(prefix="/profiles", tags=["Profiles"], responses=ERROR_RESPONSES)


def _with_profile(user: User, profile: Any) -> UserWithProfileResponse:
    response = UserWithProfileResponse.model_validate(user)
    response.profile = serialize_profile(user.kind, profile)
    return response


@router.get("/me", response_model=UserWithProfileResponse, summary="Current user")
async def get_me(
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserWithProfileResponse:
    result = await user_service.get_user_with_profile(current_user.id)
    return _with_profile(result["user"], result["profile"])


@router.post(
    "/me/onboarding",
    response_model=UserWithProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Complete onboarding",
    description="Choose a user kind and create the matching profile in one step",
)
async def complete_onboarding(
    request: OnboardingRequest,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserWithProfileResponse:
    result = await user_service.complete_onboarding(
        user_id=current_user.id,
        kind=request.profile.kind,
        payload=profile_payload(request.profile),
        user_fields={"bio": request.bio, "avatar_url": request.avatar_url},
    )
    return _with_profile(result["user"], result["profile"])


@router.get("/search", response_model=List[UserResponse], summary="Search users")
async def search_users(
    q: str = Query(..., min_length=1, max_length=100),
    kind: Optional[UserKind] = Query(None, description="Only users of this kind"),
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    users = await user_service.search_users(
        q, skip=pagination.skip, limit=pagination.limit, kind=kind
    )
    return [UserResponse.model_validate(user) for user in users]


@router.get(
    "/by-username/{username}",
    response_model=UserWithProfileResponse,
    summary="Get user by username",
)
async def get_user_by_username(
    username: str,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserWithProfileResponse:
    user = await user_service.get_user_by_username(username)
    result = await user_service.get_user_with_profile(user.id)
    return _with_profile(result["user"], result["profile"])


@router.get("/{user_id}", response_model=UserWithProfileResponse, summary="Get user")
async def get_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserWithProfileResponse:
    result = await user_service.get_user_with_profile(user_id)
    return _with_profile(result["user"], result["profile"])


# Profiles


@profiles_router.post(
    "",
    response_model=ProfileCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create profile",
    description="Create the caller's profile; its kind must match the caller's kind",
)
async def create_profile(
    request: ProfileCreateRequest,
    current_user: User = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> ProfileCreatedResponse:
    profile_id = await profile_service.create_profile(
        current_user.id, request.kind, profile_payload(request)
    )
    return ProfileCreatedResponse(profile_id=profile_id, kind=request.kind)


@profiles_router.patch(
    "/me",
    response_model=SuccessResponse,
    summary="Update profile",
    description="Shallow merge: each given top-level field is replaced wholesale",
)
async def update_my_profile(
    updates: Dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    await profile_service.update_profile(current_user.id, updates)
    return SuccessResponse(message="Profile updated")


@profiles_router.get(
    "/trainers", response_model=List[TrainerResponse], summary="Individuals offering training"
)
async def list_trainers(
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> List[TrainerResponse]:
    trainers = await profile_service.list_trainers(limit=limit)
    return [
        TrainerResponse(
            user=row["user"].summary(),
            profile=IndividualProfileResponse.model_validate(row["profile"]),
        )
        for row in trainers
    ]
