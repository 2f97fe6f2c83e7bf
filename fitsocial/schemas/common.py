"""
Shared schemas: error envelope, acknowledgements and user summaries.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from fitsocial.models.user import UserKind


class APIError(BaseModel):
    """Schema for API error responses."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    request_id: Optional[str] = Field(None, description="Request trace id")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "AlreadyFollowingError",
                "message": "Already following this user",
                "details": {},
                "request_id": "5b0c4a1e-0d5e-4c43-9c1e-2f1f3a3f9d10",
            }
        }


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class UserSummary(BaseModel):
    """Compact author / participant representation."""

    id: int
    username: str
    avatar_url: Optional[str] = None
    kind: Optional[UserKind] = None
    is_verified: bool = False
    is_premium: bool = False

    class Config:
        from_attributes = True


ERROR_RESPONSES = {
    400: {"model": APIError, "description": "Validation error"},
    401: {"model": APIError, "description": "Authentication required"},
    403: {"model": APIError, "description": "Permission denied"},
    404: {"model": APIError, "description": "Not found"},
    409: {"model": APIError, "description": "Conflict with current state"},
}
