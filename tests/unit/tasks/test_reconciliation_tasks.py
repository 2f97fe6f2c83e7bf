"""
Tests for the periodic reconciliation jobs.
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select

from fitsocial.models.profile import IndividualProfile
from fitsocial.models.user import User
from fitsocial.services.social_service import SocialService
from fitsocial.tasks import reconciliation_tasks
from fitsocial.tasks.celery_app import celery_app


@pytest.mark.unit
class TestSchedule:
    def test_both_jobs_are_scheduled(self):
        tasks = {entry["task"] for entry in celery_app.conf.beat_schedule.values()}

        assert tasks == {"reconcile_follow_counters", "reconcile_activity_scores"}

    def test_jobs_are_registered(self):
        assert "reconcile_follow_counters" in celery_app.tasks
        assert "reconcile_activity_scores" in celery_app.tasks


@pytest.mark.unit
class TestTaskResults:
    def test_follow_task_reports_corrections(self):
        correction = {
            "user_id": 4,
            "follower_count": 3,
            "following_count": 0,
            "actual_followers": 1,
            "actual_following": 0,
        }
        runner = AsyncMock(return_value=[correction])

        with patch.object(reconciliation_tasks, "_run_with_session", runner):
            result = reconciliation_tasks.reconcile_follow_counters_task.apply(
                kwargs={"user_id": 4}
            ).get()

        assert result == {"status": "success", "corrected": 1, "corrections": [correction]}
        runner.assert_awaited_once_with(reconciliation_tasks._reconcile_follow_counters, 4)

    def test_failures_propagate(self):
        runner = AsyncMock(side_effect=RuntimeError("database unavailable"))

        with patch.object(reconciliation_tasks, "_run_with_session", runner):
            outcome = reconciliation_tasks.reconcile_activity_scores_task.apply()

        assert outcome.failed()
        assert isinstance(outcome.result, RuntimeError)


@pytest.mark.integration
class TestJobBodies:
    @pytest.mark.asyncio
    async def test_follow_job_repairs_counters(self, db_session, factory):
        alice = await factory.individual("alice")
        bob = await factory.individual("bob")
        alice_id, bob_id = alice.id, bob.id
        await SocialService(db_session).follow(alice_id, bob_id)

        stored = await db_session.get(User, alice_id)
        stored.following_count = 5
        await db_session.commit()

        corrections = await reconciliation_tasks._reconcile_follow_counters(db_session, None)

        assert [entry["user_id"] for entry in corrections] == [alice_id]
        await db_session.refresh(stored)
        assert stored.following_count == 1

    @pytest.mark.asyncio
    async def test_score_job_runs_without_cache(self, db_session, factory):
        runner = await factory.individual("runner", score=42)
        runner_id = runner.id

        with patch.object(
            reconciliation_tasks, "init_cache", AsyncMock(side_effect=ConnectionError("down"))
        ):
            corrections = await reconciliation_tasks._reconcile_activity_scores(
                db_session, None
            )

        assert corrections == [
            {"user_id": runner_id, "stored_score": 42, "replayed_score": 0}
        ]
        profile = (
            await db_session.execute(
                select(IndividualProfile).where(IndividualProfile.user_id == runner_id)
            )
        ).scalar_one()
        await db_session.refresh(profile)
        assert profile.activity_score == 0
