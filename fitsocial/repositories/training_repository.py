"""
Training Repository - Data access for training requests.
"""

from typing import List, Optional

from sqlalchemy import and_, desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fitsocial.models.training import TrainingRequest, TrainingRequestStatus
from fitsocial.repositories.base import BaseRepository


class TrainingRequestRepository(BaseRepository[TrainingRequest]):
    def __init__(self, db: AsyncSession):
        super().__init__(TrainingRequest, db)

    async def get_with_users(self, request_id: int) -> Optional[TrainingRequest]:
        result = await self.db.execute(
            select(TrainingRequest)
            .options(
                selectinload(TrainingRequest.requester),
                selectinload(TrainingRequest.trainer),
            )
            .where(TrainingRequest.id == request_id)
        )
        return result.scalar_one_or_none()

    async def get_for_pair(
        self, requester_id: int, trainer_id: int
    ) -> Optional[TrainingRequest]:
        result = await self.db.execute(
            select(TrainingRequest).where(
                and_(
                    TrainingRequest.requester_id == requester_id,
                    TrainingRequest.trainer_id == trainer_id,
                )
            )
        )
        return result.scalar_one_or_none()

    async def list_received(
        self, trainer_id: int, status: Optional[TrainingRequestStatus] = None
    ) -> List[TrainingRequest]:
        query = (
            select(TrainingRequest)
            .options(selectinload(TrainingRequest.requester))
            .where(TrainingRequest.trainer_id == trainer_id)
        )
        if status is not None:
            query = query.where(TrainingRequest.status == status)

        result = await self.db.execute(
            query.order_by(desc(TrainingRequest.created_at), desc(TrainingRequest.id))
        )
        return list(result.scalars().all())

    async def list_sent(
        self, requester_id: int, status: Optional[TrainingRequestStatus] = None
    ) -> List[TrainingRequest]:
        query = (
            select(TrainingRequest)
            .options(selectinload(TrainingRequest.trainer))
            .where(TrainingRequest.requester_id == requester_id)
        )
        if status is not None:
            query = query.where(TrainingRequest.status == status)

        result = await self.db.execute(
            query.order_by(desc(TrainingRequest.created_at), desc(TrainingRequest.id))
        )
        return list(result.scalars().all())
