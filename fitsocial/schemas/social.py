"""
Social graph schemas.
"""

from typing import List

from pydantic import BaseModel

from fitsocial.schemas.common import UserSummary


class FollowStatusResponse(BaseModel):
    is_following: bool
    is_followed_by: bool
    is_mutual: bool


class FollowActionResponse(BaseModel):
    success: bool = True
    following: bool


class UserListResponse(BaseModel):
    users: List[UserSummary]
    skip: int
    limit: int


class CounterCorrection(BaseModel):
    user_id: int
    follower_count: int
    following_count: int
    actual_followers: int
    actual_following: int


class FollowReconcileResponse(BaseModel):
    corrected: int
    corrections: List[CounterCorrection]
