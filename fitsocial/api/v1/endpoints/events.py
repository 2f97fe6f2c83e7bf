"""
Event API endpoints.
"""

from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, Query, status

from fitsocial.dependencies import get_current_user, get_event_service
from fitsocial.models.user import User
from fitsocial.schemas.common import ERROR_RESPONSES, UserSummary
from fitsocial.schemas.events import (
    EventCreateRequest,
    EventDetailResponse,
    EventResponse,
    RSVPRequest,
    RSVPResponse,
    RSVPResultResponse,
    RSVPStatusResponse,
)
from fitsocial.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["Events"], responses=ERROR_RESPONSES)


@router.post(
    "", response_model=EventResponse, status_code=status.HTTP_201_CREATED, summary="Create event"
)
async def create_event(
    request: EventCreateRequest,
    current_user: User = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    event = await event_service.create_event(
        creator_id=current_user.id,
        title=request.title,
        description=request.description,
        starts_at=request.starts_at,
        ends_at=request.ends_at,
        location=request.location.model_dump(exclude_none=True) if request.location else None,
        max_participants=request.max_participants,
        event_type=request.event_type,
        is_public=request.is_public,
    )
    return EventResponse.model_validate(event)


@router.get("", response_model=List[EventResponse], summary="Upcoming public events")
async def list_public_events(
    limit: int = Query(20, ge=1, le=100),
    include_past: bool = Query(False),
    current_user: User = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service),
) -> List[EventResponse]:
    since = None if include_past else datetime.now(timezone.utc)
    events = await event_service.list_public_events(limit=limit, since=since)
    return [EventResponse.model_validate(event) for event in events]


@router.get("/mine", response_model=List[EventResponse], summary="Events I created")
async def list_my_events(
    current_user: User = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service),
) -> List[EventResponse]:
    events = await event_service.list_user_events(current_user.id)
    return [EventResponse.model_validate(event) for event in events]


@router.get("/{event_id}", response_model=EventDetailResponse, summary="Event details")
async def get_event(
    event_id: int,
    current_user: User = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service),
) -> EventDetailResponse:
    result = await event_service.get_event(event_id)
    event = result["event"]

    response = EventDetailResponse.model_validate(event)
    response.creator = UserSummary.model_validate(event.creator) if event.creator else None
    response.rsvps = [RSVPResponse.model_validate(rsvp) for rsvp in result["rsvps"]]
    return response


@router.post("/{event_id}/rsvp", response_model=RSVPResultResponse, summary="RSVP")
async def rsvp(
    event_id: int,
    request: RSVPRequest,
    current_user: User = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service),
) -> RSVPResultResponse:
    return RSVPResultResponse(
        **await event_service.rsvp(event_id, current_user.id, request.status)
    )


@router.get(
    "/{event_id}/rsvp", response_model=RSVPStatusResponse, summary="My RSVP status"
)
async def get_rsvp_status(
    event_id: int,
    current_user: User = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service),
) -> RSVPStatusResponse:
    status_value = await event_service.get_rsvp_status(event_id, current_user.id)
    return RSVPStatusResponse(event_id=event_id, status=status_value)
