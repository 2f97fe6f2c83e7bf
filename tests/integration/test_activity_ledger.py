"""
Integration tests for the activity ledger, score rollup and reconciliation.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select

from fitsocial.core.exceptions import InvalidActivityKindError
from fitsocial.models.activity import ActivityTransaction
from fitsocial.models.profile import IndividualProfile
from fitsocial.models.user import UserKind
from fitsocial.services.activity_service import ActivityService


async def _score(session, user_id):
    result = await session.execute(
        select(IndividualProfile).where(IndividualProfile.user_id == user_id)
    )
    profile = result.scalar_one()
    await session.refresh(profile)
    return profile.activity_score


async def _ledger_size(session, user_id):
    result = await session.execute(
        select(func.count(ActivityTransaction.id)).where(
            ActivityTransaction.user_id == user_id
        )
    )
    return result.scalar()


@pytest.mark.integration
class TestActivityLedger:
    @pytest.mark.asyncio
    async def test_score_is_floored_before_later_gains(self, db_session, factory):
        user = await factory.individual("runner")
        service = ActivityService(db_session)

        await service.record_activity(user.id, "manual_adjustment", -50)
        await service.record_activity(user.id, "workout_posted", 100)

        assert await _score(db_session, user.id) == 100
        assert await _ledger_size(db_session, user.id) == 2

    @pytest.mark.asyncio
    async def test_losses_clamp_at_zero(self, db_session, factory):
        user = await factory.individual("lifter")
        service = ActivityService(db_session)

        await service.record_activity(user.id, "workout_posted", 10)
        await service.record_activity(user.id, "manual_adjustment", -30)

        assert await _score(db_session, user.id) == 0

    @pytest.mark.asyncio
    async def test_rollup_refreshes_last_activity_update(self, db_session, factory):
        stale = datetime(2020, 1, 1, tzinfo=timezone.utc)
        user = await factory.individual("sprinter", last_update=stale)

        await ActivityService(db_session).record_activity(user.id, "weekly_streak", 5)

        profile = (
            await db_session.execute(
                select(IndividualProfile).where(IndividualProfile.user_id == user.id)
            )
        ).scalar_one()
        await db_session.refresh(profile)
        assert profile.last_activity_update.replace(tzinfo=None) > stale.replace(
            tzinfo=None
        )

    @pytest.mark.asyncio
    async def test_gym_activity_only_touches_ledger(self, db_session, factory):
        gym = await factory.gym("ironworks")
        service = ActivityService(db_session)

        transaction_id = await service.record_activity(
            gym.id, "event_created", 25, description="Hosted a bootcamp"
        )

        history = await service.get_activity_history(gym.id)
        assert [entry.id for entry in history] == [transaction_id]
        assert history[0].activity_kind.value == "event_created"
        assert history[0].description == "Hosted a bootcamp"

    @pytest.mark.asyncio
    async def test_individual_without_profile_keeps_ledger_row(self, db_session, factory):
        user = await factory.user("halfway", kind=UserKind.INDIVIDUAL)

        await ActivityService(db_session).record_activity(user.id, "workout_posted", 10)

        assert await _ledger_size(db_session, user.id) == 1

    @pytest.mark.asyncio
    async def test_unknown_kind_writes_nothing(self, db_session, factory):
        user = await factory.individual("typo")
        user_id = user.id

        with pytest.raises(InvalidActivityKindError):
            await ActivityService(db_session).record_activity(user_id, "napping", 10)

        assert await _ledger_size(db_session, user_id) == 0
        assert await _score(db_session, user_id) == 0

    @pytest.mark.asyncio
    async def test_metadata_and_related_id_are_kept(self, db_session, factory):
        user = await factory.individual("meta")
        service = ActivityService(db_session)

        await service.record_activity(
            user.id,
            "achievement_unlocked",
            15,
            related_id="badge-7",
            metadata={"badge": "early bird"},
        )

        entry = (await service.get_activity_history(user.id))[0]
        assert entry.related_id == "badge-7"
        assert entry.activity_metadata == {"badge": "early bird"}

    @pytest.mark.asyncio
    async def test_recent_feed_spans_users(self, db_session, factory):
        first = await factory.individual("first")
        second = await factory.gym("second")
        service = ActivityService(db_session)
        await service.record_activity(first.id, "workout_posted", 10)
        await service.record_activity(second.id, "event_created", 20)

        feed = await service.get_recent_activity_feed(limit=10)

        assert {row["user"].username for row in feed} == {"first", "second"}

    @pytest.mark.asyncio
    async def test_reconcile_replays_ledger(self, db_session, factory):
        user = await factory.individual("drifter")
        user_id = user.id
        service = ActivityService(db_session)
        await service.record_activity(user_id, "workout_posted", 10)
        await service.record_activity(user_id, "manual_adjustment", -30)
        await service.record_activity(user_id, "workout_posted", 5)

        profile = (
            await db_session.execute(
                select(IndividualProfile).where(IndividualProfile.user_id == user_id)
            )
        ).scalar_one()
        profile.activity_score = 999
        await db_session.commit()

        corrections = await service.reconcile_activity_scores()

        assert corrections == [
            {"user_id": user_id, "stored_score": 999, "replayed_score": 5}
        ]
        assert await _score(db_session, user_id) == 5
        assert await service.reconcile_activity_scores() == []
