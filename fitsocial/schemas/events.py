"""
Event and RSVP schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from fitsocial.models.event import EventType, RSVPStatus
from fitsocial.schemas.common import UserSummary


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class EventLocation(BaseModel):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class EventCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=5000)
    starts_at: datetime
    ends_at: Optional[datetime] = None
    location: Optional[EventLocation] = None
    max_participants: Optional[int] = Field(None, ge=1)
    event_type: EventType
    is_public: bool = True


class EventResponse(BaseModel):
    id: int
    creator_id: int
    title: str
    description: str = ""
    starts_at: datetime
    ends_at: Optional[datetime] = None
    location: Optional[EventLocation] = None
    max_participants: Optional[int] = None
    event_type: EventType
    is_public: bool
    rsvp_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RSVPResponse(BaseModel):
    user_id: int
    status: RSVPStatus

    class Config:
        from_attributes = True


class EventDetailResponse(EventResponse):
    creator: Optional[UserSummary] = None
    rsvps: List[RSVPResponse] = Field(default_factory=list)


class RSVPRequest(BaseModel):
    status: RSVPStatus


class RSVPResultResponse(BaseModel):
    status: RSVPStatus
    rsvp_count: int


class RSVPStatusResponse(BaseModel):
    event_id: int
    status: Optional[RSVPStatus] = None
