"""
FastAPI dependencies for dependency injection.

This provides:
1. Service layer dependency injection
2. Current-user resolution from the identity token
3. Common utility dependencies
"""

from typing import Any, Dict

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.core.security import get_current_identity
from fitsocial.database import get_db
from fitsocial.models.user import User
from fitsocial.services.activity_service import ActivityService
from fitsocial.services.chat_service import ChatService
from fitsocial.services.event_service import EventService
from fitsocial.services.leaderboard_service import LeaderboardService
from fitsocial.services.post_service import PostService
from fitsocial.services.profile_service import ProfileService
from fitsocial.services.social_service import SocialService
from fitsocial.services.training_service import TrainingService
from fitsocial.services.user_service import UserService
from fitsocial.services.workout_service import WorkoutService


# Service Dependencies
def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def get_profile_service(db: AsyncSession = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


def get_social_service(db: AsyncSession = Depends(get_db)) -> SocialService:
    return SocialService(db)


def get_activity_service(db: AsyncSession = Depends(get_db)) -> ActivityService:
    return ActivityService(db)


def get_leaderboard_service(db: AsyncSession = Depends(get_db)) -> LeaderboardService:
    return LeaderboardService(db)


def get_training_service(db: AsyncSession = Depends(get_db)) -> TrainingService:
    return TrainingService(db)


def get_post_service(db: AsyncSession = Depends(get_db)) -> PostService:
    return PostService(db)


def get_chat_service(db: AsyncSession = Depends(get_db)) -> ChatService:
    return ChatService(db)


def get_event_service(db: AsyncSession = Depends(get_db)) -> EventService:
    return EventService(db)


def get_workout_service(db: AsyncSession = Depends(get_db)) -> WorkoutService:
    return WorkoutService(db)


# Current user
async def get_current_user(
    identity: Dict[str, Any] = Depends(get_current_identity),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """
    Resolve the token subject to a local user, provisioning it on first
    sign-in.
    """
    user = await user_service.get_or_create_user(
        external_id=identity["external_id"],
        email=identity.get("email"),
        name=identity.get("name"),
        avatar_url=identity.get("avatar_url"),
    )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is inactive",
        )
    return user


def is_admin(identity: Dict[str, Any] = Depends(get_current_identity)) -> bool:
    return identity.get("role") == "admin"


# Utility Dependencies
class PaginationParams:
    """Pagination parameters for list endpoints."""

    def __init__(self, skip: int = 0, limit: int = 20):
        self.skip = max(0, skip)
        self.limit = min(max(1, limit), 100)


def get_pagination_params(skip: int = 0, limit: int = 20) -> PaginationParams:
    """
    Args:
        skip: Number of items to skip (default: 0)
        limit: Maximum items to return (default: 20, max: 100)
    """
    return PaginationParams(skip, limit)
