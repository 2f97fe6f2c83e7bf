"""
Background repair jobs for denormalized state.

1. Follow counters are recounted from the follow edges
2. Activity scores are replayed from the activity ledger
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fitsocial.core.cache import cache_manager, cleanup_cache, init_cache
from fitsocial.database import create_engine_from_settings
from fitsocial.services.activity_service import ActivityService
from fitsocial.services.social_service import SocialService
from fitsocial.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


async def _run_with_session(job, *args):
    # Async engines are bound to the event loop that created them
    engine = create_engine_from_settings()
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_factory() as session:
            return await job(session, *args)
    finally:
        await engine.dispose()


async def _reconcile_follow_counters(session: AsyncSession, user_id: Optional[int]):
    return await SocialService(session).reconcile_follow_counters(user_id)


async def _reconcile_activity_scores(session: AsyncSession, user_id: Optional[int]):
    try:
        await init_cache()
    except ConnectionError as e:
        logger.warning(f"Leaderboard cache unavailable, skipping invalidation: {e}")
    try:
        return await ActivityService(session).reconcile_activity_scores(user_id)
    finally:
        if cache_manager.redis_client:
            await cleanup_cache()


@celery_app.task(bind=True, name="reconcile_follow_counters")
def reconcile_follow_counters_task(self, user_id: Optional[int] = None) -> Dict[str, Any]:
    """
    Rewrite follower/following counters that drifted from the edge table.

    Returns:
        Dict with the number of repaired users and their corrections
    """
    logger.info(f"Starting follow counter reconciliation (user_id={user_id})")

    try:
        corrections = asyncio.run(_run_with_session(_reconcile_follow_counters, user_id))
    except Exception as exc:
        logger.error(f"Follow counter reconciliation failed: {exc}")
        raise

    logger.info(f"Follow counter reconciliation repaired {len(corrections)} users")
    return {"status": "success", "corrected": len(corrections), "corrections": corrections}


@celery_app.task(bind=True, name="reconcile_activity_scores")
def reconcile_activity_scores_task(self, user_id: Optional[int] = None) -> Dict[str, Any]:
    """
    Replay the activity ledger and rewrite drifted scores.

    Returns:
        Dict with the number of repaired profiles and their corrections
    """
    logger.info(f"Starting activity score reconciliation (user_id={user_id})")

    try:
        corrections = asyncio.run(_run_with_session(_reconcile_activity_scores, user_id))
    except Exception as exc:
        logger.error(f"Activity score reconciliation failed: {exc}")
        raise

    logger.info(f"Activity score reconciliation repaired {len(corrections)} profiles")
    return {"status": "success", "corrected": len(corrections), "corrections": corrections}
