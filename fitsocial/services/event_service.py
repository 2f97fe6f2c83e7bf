"""
Event Service - Community events and RSVPs.

rsvp_count always equals the number of "going" RSVPs: it is recounted in the
same transaction as every RSVP change.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.core.exceptions import ConflictError, NotFoundError, ValidationError
from fitsocial.models.event import Event, EventType, RSVPStatus
from fitsocial.repositories.event_repository import EventRepository
from fitsocial.repositories.user_repository import UserRepository
from fitsocial.services.base import BaseService


class EventService(BaseService):
    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.event_repo = EventRepository(db)
        self.user_repo = UserRepository(db)

    async def create_event(
        self,
        creator_id: int,
        title: str,
        starts_at: datetime,
        event_type: Any,
        description: str = "",
        ends_at: Optional[datetime] = None,
        location: Optional[Dict[str, Any]] = None,
        max_participants: Optional[int] = None,
        is_public: bool = True,
    ) -> Event:
        """
        Create an event. Any user kind may create events.

        Raises:
            ValidationError: Blank title, bad type, or ends before it starts
            NotFoundError: Unknown creator
        """
        self._log_operation("create_event", creator_id=creator_id, title=title)

        title = (title or "").strip()
        if not title:
            raise ValidationError("Event title is required")
        if ends_at is not None and ends_at < starts_at:
            raise ValidationError("Event cannot end before it starts")
        if max_participants is not None and max_participants < 1:
            raise ValidationError("max_participants must be positive")
        try:
            event_type = EventType(event_type)
        except ValueError:
            raise ValidationError(f"Unknown event type: {event_type}")

        try:
            if not await self.user_repo.exists(creator_id):
                raise NotFoundError("Creator not found")

            event = await self.event_repo.create(
                {
                    "creator_id": creator_id,
                    "title": title,
                    "description": description or "",
                    "starts_at": starts_at,
                    "ends_at": ends_at,
                    "location": location,
                    "max_participants": max_participants,
                    "event_type": event_type,
                    "is_public": is_public,
                    "rsvp_count": 0,
                }
            )
            await self.db.commit()
            return event

        except Exception as error:
            await self._handle_service_error(error, "create event")

    async def get_event(self, event_id: int) -> Dict[str, Any]:
        """
        Returns:
            {"event": Event (creator loaded), "rsvps": [EventRSVP]}
        """
        event = await self.event_repo.get_with_creator(event_id)
        if not event:
            raise NotFoundError("Event not found")
        rsvps = await self.event_repo.get_rsvps(event_id)
        return {"event": event, "rsvps": rsvps}

    async def list_public_events(
        self, limit: int = 20, since: Optional[datetime] = None
    ) -> List[Event]:
        return await self.event_repo.get_public_upcoming(since=since, limit=limit)

    async def list_user_events(self, creator_id: int) -> List[Event]:
        return await self.event_repo.get_by_creator(creator_id)

    async def rsvp(self, event_id: int, user_id: int, status: Any) -> Dict[str, Any]:
        """
        Create or change the user's RSVP and recount attendance.

        Raises:
            ValidationError: Unknown status
            NotFoundError: Unknown event
            ConflictError: Event is full, or a concurrent RSVP won
        """
        self._log_operation("rsvp", event_id=event_id, user_id=user_id, status=status)

        try:
            status = RSVPStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown RSVP status: {status}")

        try:
            event = await self.event_repo.get(event_id)
            if not event:
                raise NotFoundError("Event not found")

            existing = await self.event_repo.get_rsvp(event_id, user_id)
            already_going = existing is not None and existing.status == RSVPStatus.GOING
            if (
                status == RSVPStatus.GOING
                and not already_going
                and event.max_participants is not None
                and await self.event_repo.count_going(event_id) >= event.max_participants
            ):
                raise ConflictError("Event is full")

            await self.event_repo.upsert_rsvp(event_id, user_id, status)
            going = await self.event_repo.count_going(event_id)
            await self.event_repo.set_rsvp_count(event_id, going)

            await self.db.commit()
            return {"status": status.value, "rsvp_count": going}

        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("RSVP was changed concurrently, retry")
        except Exception as error:
            await self._handle_service_error(error, "rsvp to event")

    async def get_rsvp_status(self, event_id: int, user_id: int) -> Optional[str]:
        rsvp = await self.event_repo.get_rsvp(event_id, user_id)
        return rsvp.status.value if rsvp else None
