"""
Integration tests for events and RSVPs.
"""

from datetime import datetime, timedelta, timezone

import pytest

from fitsocial.core.exceptions import ConflictError, NotFoundError, ValidationError
from fitsocial.models.event import Event
from fitsocial.services.event_service import EventService

STARTS_AT = datetime(2026, 11, 1, 9, 0, tzinfo=timezone.utc)


@pytest.mark.integration
class TestEvents:
    @pytest.fixture
    async def host_id(self, factory):
        gym = await factory.gym("ironworks")
        return gym.id

    @pytest.mark.asyncio
    async def test_create_and_fetch(self, db_session, host_id):
        service = EventService(db_session)

        event = await service.create_event(
            host_id,
            "  Saturday bootcamp ",
            STARTS_AT,
            "workout",
            location={"city": "Austin"},
            max_participants=20,
        )
        detail = await service.get_event(event.id)

        assert detail["event"].title == "Saturday bootcamp"
        assert detail["event"].creator.username == "ironworks"
        assert detail["event"].rsvp_count == 0
        assert detail["rsvps"] == []

    @pytest.mark.asyncio
    async def test_invalid_events(self, db_session, host_id):
        service = EventService(db_session)

        with pytest.raises(ValidationError):
            await service.create_event(host_id, " ", STARTS_AT, "workout")
        with pytest.raises(ValidationError):
            await service.create_event(
                host_id, "Backwards", STARTS_AT, "workout",
                ends_at=STARTS_AT - timedelta(hours=1),
            )
        with pytest.raises(ValidationError):
            await service.create_event(host_id, "Party", STARTS_AT, "rave")
        with pytest.raises(NotFoundError):
            await service.get_event(9999)

    @pytest.mark.asyncio
    async def test_public_listing_skips_private_and_past(self, db_session, host_id):
        service = EventService(db_session)
        await service.create_event(host_id, "Later", STARTS_AT + timedelta(days=2), "meetup")
        await service.create_event(host_id, "Sooner", STARTS_AT, "meetup")
        await service.create_event(host_id, "Hidden", STARTS_AT, "meetup", is_public=False)
        await service.create_event(host_id, "Old", STARTS_AT - timedelta(days=30), "meetup")

        upcoming = await service.list_public_events(since=STARTS_AT - timedelta(days=1))
        mine = await service.list_user_events(host_id)

        assert [event.title for event in upcoming] == ["Sooner", "Later"]
        assert len(mine) == 4


@pytest.mark.integration
class TestRSVP:
    @pytest.fixture
    async def setup(self, db_session, factory):
        host = await factory.gym("ironworks")
        ann = await factory.individual("ann")
        ben = await factory.individual("ben")
        event = await EventService(db_session).create_event(
            host.id, "Tiny class", STARTS_AT, "workout", max_participants=1
        )
        return event.id, ann.id, ben.id

    @pytest.mark.asyncio
    async def test_rsvp_count_tracks_going(self, db_session, setup):
        event_id, ann_id, _ = setup
        service = EventService(db_session)

        assert await service.rsvp(event_id, ann_id, "going") == {
            "status": "going",
            "rsvp_count": 1,
        }
        assert await service.rsvp(event_id, ann_id, "going") == {
            "status": "going",
            "rsvp_count": 1,
        }
        assert await service.rsvp(event_id, ann_id, "maybe") == {
            "status": "maybe",
            "rsvp_count": 0,
        }
        assert await service.get_rsvp_status(event_id, ann_id) == "maybe"

    @pytest.mark.asyncio
    async def test_full_event_rejects_new_attendees(self, db_session, setup):
        event_id, ann_id, ben_id = setup
        service = EventService(db_session)
        await service.rsvp(event_id, ann_id, "going")

        with pytest.raises(ConflictError):
            await service.rsvp(event_id, ben_id, "going")

        assert await service.rsvp(event_id, ben_id, "maybe") == {
            "status": "maybe",
            "rsvp_count": 1,
        }
        event = await db_session.get(Event, event_id)
        await db_session.refresh(event)
        assert event.rsvp_count == 1
        assert await service.get_rsvp_status(event_id, ann_id) == "going"

    @pytest.mark.asyncio
    async def test_bad_status_and_unknown_event(self, db_session, setup):
        event_id, ann_id, _ = setup
        service = EventService(db_session)

        with pytest.raises(ValidationError):
            await service.rsvp(event_id, ann_id, "perhaps")
        with pytest.raises(NotFoundError):
            await service.rsvp(9999, ann_id, "going")
        assert await service.get_rsvp_status(event_id, ann_id) is None
