"""
Event Repository - Data access for events and RSVPs.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fitsocial.models.event import Event, EventRSVP, RSVPStatus
from fitsocial.repositories.base import BaseRepository


class EventRepository(BaseRepository[Event]):
    def __init__(self, db: AsyncSession):
        super().__init__(Event, db)

    async def get_with_creator(self, event_id: int) -> Optional[Event]:
        result = await self.db.execute(
            select(Event).options(selectinload(Event.creator)).where(Event.id == event_id)
        )
        return result.scalar_one_or_none()

    async def get_public_upcoming(
        self, since: Optional[datetime] = None, limit: int = 20
    ) -> List[Event]:
        """Public events ordered by start time."""
        query = (
            select(Event)
            .options(selectinload(Event.creator))
            .where(Event.is_public.is_(True))
        )
        if since is not None:
            query = query.where(Event.starts_at >= since)

        result = await self.db.execute(
            query.order_by(Event.starts_at, Event.id).limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_creator(self, creator_id: int) -> List[Event]:
        result = await self.db.execute(
            select(Event)
            .where(Event.creator_id == creator_id)
            .order_by(Event.starts_at, Event.id)
        )
        return list(result.scalars().all())

    # RSVPs

    async def get_rsvp(self, event_id: int, user_id: int) -> Optional[EventRSVP]:
        result = await self.db.execute(
            select(EventRSVP).where(
                and_(EventRSVP.event_id == event_id, EventRSVP.user_id == user_id)
            )
        )
        return result.scalar_one_or_none()

    async def get_rsvps(self, event_id: int) -> List[EventRSVP]:
        result = await self.db.execute(
            select(EventRSVP).where(EventRSVP.event_id == event_id).order_by(EventRSVP.id)
        )
        return list(result.scalars().all())

    async def upsert_rsvp(
        self, event_id: int, user_id: int, status: RSVPStatus
    ) -> EventRSVP:
        rsvp = await self.get_rsvp(event_id, user_id)
        if rsvp is None:
            rsvp = EventRSVP(event_id=event_id, user_id=user_id, status=status)
            self.db.add(rsvp)
        else:
            rsvp.status = status
        await self.db.flush()
        return rsvp

    async def count_going(self, event_id: int) -> int:
        result = await self.db.execute(
            select(func.count(EventRSVP.id)).where(
                and_(
                    EventRSVP.event_id == event_id,
                    EventRSVP.status == RSVPStatus.GOING,
                )
            )
        )
        return result.scalar() or 0

    async def set_rsvp_count(self, event_id: int, count: int) -> None:
        await self.db.execute(
            update(Event)
            .where(Event.id == event_id)
            .values(rsvp_count=count)
            .execution_options(synchronize_session="fetch")
        )
