"""
Event models - community events and RSVPs.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy import UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitsocial.database import Base

if TYPE_CHECKING:
    from fitsocial.models.user import User


class EventType(str, Enum):
    WORKOUT = "workout"
    COMPETITION = "competition"
    MEETUP = "meetup"
    SEMINAR = "seminar"


class RSVPStatus(str, Enum):
    GOING = "going"
    MAYBE = "maybe"
    NOT_GOING = "not_going"


class Event(Base):
    """
    Community event.

    location example:
        {"city": "Austin", "state": "TX", "country": "US",
         "coordinates": {"latitude": 30.26, "longitude": -97.74}}
    """

    __tablename__ = "events"

    creator_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    ends_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    location: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON)
    max_participants: Mapped[Optional[int]] = mapped_column(Integer)
    event_type: Mapped[EventType] = mapped_column(SQLEnum(EventType, name="event_type"))
    is_public: Mapped[bool] = mapped_column(Boolean, default=True)

    # Number of "going" RSVPs
    rsvp_count: Mapped[int] = mapped_column(Integer, default=0)

    creator: Mapped["User"] = relationship("User")

    __table_args__ = (Index("idx_event_public_starts", "is_public", "starts_at"),)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title='{self.title[:30]}')>"


class EventRSVP(Base):
    __tablename__ = "event_rsvps"

    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    status: Mapped[RSVPStatus] = mapped_column(SQLEnum(RSVPStatus, name="rsvp_status"))

    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_event_rsvp"),)
