"""
User schemas for request/response validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from fitsocial.models.user import UserKind
from fitsocial.schemas.profiles import ProfileCreateRequest, ProfileResponse


class UserResponse(BaseModel):
    """Public user representation."""

    id: int = Field(..., description="User's unique ID")
    username: str
    email: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    kind: Optional[UserKind] = None
    follower_count: int = 0
    following_count: int = 0
    onboarding_complete: bool = False
    is_verified: bool = False
    is_premium: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "username": "janedoe",
                "email": "jane@example.com",
                "kind": "individual",
                "follower_count": 12,
                "following_count": 4,
                "onboarding_complete": True,
                "is_verified": False,
                "is_premium": False,
                "created_at": "2024-01-15T10:30:00Z",
            }
        }


class UserWithProfileResponse(UserResponse):
    profile: Optional[ProfileResponse] = None


class OnboardingRequest(BaseModel):
    """Kind choice plus the matching profile, submitted once."""

    profile: ProfileCreateRequest
    bio: Optional[str] = Field(None, max_length=500)
    avatar_url: Optional[str] = Field(None, max_length=1000)
