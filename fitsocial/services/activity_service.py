"""
Activity Service - Ledger append plus score rollup.

The ledger row and the rollup update share one transaction. The rollup is
only applied to individuals; for everyone else the ledger is the whole
record. reconcile_activity_scores recomputes the rollup from the ledger and
doubles as an audit of it.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.core.cache import CacheInvalidator, cache_invalidator
from fitsocial.core.exceptions import (
    InvalidActivityKindError,
    NotFoundError,
    ValidationError,
)
from fitsocial.models.activity import ActivityKind, ActivityTransaction
from fitsocial.models.user import User, UserKind
from fitsocial.repositories.activity_repository import ActivityRepository
from fitsocial.repositories.profile_repository import ProfileRepository
from fitsocial.repositories.user_repository import UserRepository
from fitsocial.services.base import BaseService


def replay_score(points_sequence: Iterable[int]) -> int:
    """
    Fold point deltas into a score, clamping at zero after every step.

    >>> replay_score([-50, 100])
    100
    >>> replay_score([10, -30])
    0
    """
    score = 0
    for points in points_sequence:
        score = max(0, score + points)
    return score


def parse_activity_kind(kind: Any) -> ActivityKind:
    try:
        return ActivityKind(kind)
    except ValueError:
        raise InvalidActivityKindError(kind)


class ActivityService(BaseService):
    def __init__(
        self, db: AsyncSession, invalidator: Optional[CacheInvalidator] = None
    ):
        super().__init__(db)
        self.user_repo = UserRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.activity_repo = ActivityRepository(db)
        self.invalidator = invalidator or cache_invalidator

    async def record_activity(
        self,
        user_id: int,
        kind: Any,
        points: int,
        description: str = "",
        related_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> int:
        """
        Append a ledger entry and, for individuals, apply the score delta.

        score = max(0, score + points); last_activity_update is refreshed.
        An individual without a profile still gets the ledger row; the
        rollup is skipped and logged.

        Returns:
            The transaction id

        Raises:
            InvalidActivityKindError: Unknown kind, nothing written
            ValidationError: Non-integer points
            NotFoundError: Unknown user
        """
        activity_kind = parse_activity_kind(kind)
        if isinstance(points, bool) or not isinstance(points, int):
            raise ValidationError("points must be an integer")

        self._log_operation(
            "record_activity", user_id=user_id, kind=activity_kind.value, points=points
        )

        try:
            user = await self.user_repo.get(user_id)
            if not user:
                raise NotFoundError("User not found")

            transaction, score_changed = await self.stage_activity(
                user,
                activity_kind,
                points,
                description=description,
                related_id=related_id,
                metadata=metadata,
            )
            await self.db.commit()

        except Exception as error:
            await self._handle_service_error(error, "record activity")

        if score_changed:
            await self.invalidator.invalidate_for_event("score_changed")

        return transaction.id

    async def stage_activity(
        self,
        user: User,
        kind: ActivityKind,
        points: int,
        description: str = "",
        related_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Tuple[ActivityTransaction, bool]:
        """
        Flush the ledger row and the rollup without committing.

        Shared with workout logging so the workout, its ledger row and the
        score move land in the caller's transaction.

        Returns:
            (transaction, score_changed)
        """
        transaction = await self.activity_repo.append(
            user_id=user.id,
            kind=kind,
            points=points,
            description=description or "",
            related_id=related_id,
            metadata=metadata,
        )

        if user.kind != UserKind.INDIVIDUAL:
            return transaction, False

        new_score = await self.profile_repo.apply_score_delta(
            user.id, points, datetime.now(timezone.utc)
        )
        if new_score is None:
            self.logger.warning(
                f"Individual user {user.id} has no profile; "
                f"ledger entry {transaction.id} recorded without rollup"
            )
            return transaction, False
        return transaction, True

    async def get_activity_history(
        self, user_id: int, limit: int = 20
    ) -> List[ActivityTransaction]:
        return await self.activity_repo.get_user_history(user_id, limit=limit)

    async def get_recent_activity_feed(self, limit: int = 50) -> List[Dict[str, Any]]:
        """Newest ledger entries across users, each with its user."""
        return await self.activity_repo.get_recent_with_users(limit=limit)

    async def reconcile_activity_scores(
        self, user_id: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Replay each individual's ledger and rewrite drifted scores.

        Returns:
            One correction per repaired profile
        """
        self._log_operation("reconcile_activity_scores", user_id=user_id)

        try:
            corrections = await self._execute_in_transaction(
                self._reconcile, user_id
            )
        except Exception as error:
            await self._handle_service_error(error, "reconcile activity scores")

        if corrections:
            await self.invalidator.invalidate_for_event("score_changed")
        return corrections

    async def _reconcile(self, user_id: Optional[int]) -> List[Dict[str, Any]]:
        corrections = []
        for profile in await self.profile_repo.list_individuals(user_id):
            points = await self.activity_repo.get_points_in_order(profile.user_id)
            expected = replay_score(points)
            if expected != profile.activity_score:
                self.logger.warning(
                    f"Activity score drifted for user {profile.user_id}: "
                    f"{profile.activity_score} -> {expected}"
                )
                corrections.append(
                    {
                        "user_id": profile.user_id,
                        "stored_score": profile.activity_score,
                        "replayed_score": expected,
                    }
                )
                await self.profile_repo.set_score(profile.user_id, expected)
        return corrections
