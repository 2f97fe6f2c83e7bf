"""
Post, like and comment schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from fitsocial.models.post import MediaType, PostPrivacy
from fitsocial.schemas.common import UserSummary


class PostCreateRequest(BaseModel):
    """Media is uploaded to the media host first; only its reference is sent."""

    content: Optional[str] = Field(None, max_length=5000)
    media_url: Optional[str] = Field(None, max_length=1000)
    media_public_id: Optional[str] = Field(None, max_length=255)
    media_type: Optional[MediaType] = None
    privacy: PostPrivacy = PostPrivacy.PUBLIC
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        if v is not None and len(v) > 10:
            raise ValueError("Maximum 10 tags allowed")
        return v


class PostResponse(BaseModel):
    id: int
    user_id: int
    content: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[MediaType] = None
    privacy: PostPrivacy
    tags: Optional[List[str]] = None
    like_count: int = 0
    comment_count: int = 0
    created_at: Optional[datetime] = None
    author: Optional[UserSummary] = None

    class Config:
        from_attributes = True


class LikeToggleResponse(BaseModel):
    liked: bool
    like_count: int


class CommentCreateRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    id: int
    post_id: int
    user_id: int
    content: str
    created_at: Optional[datetime] = None
    author: Optional[UserSummary] = None

    class Config:
        from_attributes = True
