"""
Activity Repository - Append-only access to the activity ledger.

Exposes no update or delete: ledger rows are written once and
kept forever.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.models.activity import ActivityKind, ActivityTransaction
from fitsocial.models.user import User


class ActivityRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(
        self,
        user_id: int,
        kind: ActivityKind,
        points: int,
        description: str = "",
        related_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ActivityTransaction:
        transaction = ActivityTransaction(
            user_id=user_id,
            activity_kind=kind,
            points=points,
            description=description,
            related_id=related_id,
            activity_metadata=metadata,
        )
        self.db.add(transaction)
        await self.db.flush()
        await self.db.refresh(transaction)
        return transaction

    async def get(self, transaction_id: int) -> Optional[ActivityTransaction]:
        result = await self.db.execute(
            select(ActivityTransaction).where(ActivityTransaction.id == transaction_id)
        )
        return result.scalar_one_or_none()

    async def get_user_history(
        self, user_id: int, limit: int = 20
    ) -> List[ActivityTransaction]:
        """Most recent transactions of one user."""
        result = await self.db.execute(
            select(ActivityTransaction)
            .where(ActivityTransaction.user_id == user_id)
            .order_by(desc(ActivityTransaction.created_at), desc(ActivityTransaction.id))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_recent_with_users(self, limit: int = 50) -> List[Dict[str, Any]]:
        """
        Most recent transactions across all users, joined with their user.

        Transactions whose user row no longer resolves are skipped by the
        inner join.
        """
        result = await self.db.execute(
            select(ActivityTransaction, User)
            .join(User, User.id == ActivityTransaction.user_id)
            .order_by(desc(ActivityTransaction.created_at), desc(ActivityTransaction.id))
            .limit(limit)
        )
        return [
            {"transaction": transaction, "user": user}
            for transaction, user in result.all()
        ]

    async def get_points_in_order(self, user_id: int) -> List[int]:
        """All point deltas of a user in the order they were recorded."""
        result = await self.db.execute(
            select(ActivityTransaction.points)
            .where(ActivityTransaction.user_id == user_id)
            .order_by(ActivityTransaction.created_at, ActivityTransaction.id)
        )
        return [row[0] for row in result.all()]
