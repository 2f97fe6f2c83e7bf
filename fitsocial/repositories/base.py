"""
Base Repository - Generic repository with the lookups every model shares.

Repositories only flush: the service that owns the logical operation decides
when the unit of work commits, so an operation touching several rows
(edge + two counters, ledger + rollup) lands as one transaction.
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitsocial.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository providing creation and primary-key lookups.

    Specific repositories inherit from this and add model-specific
    queries; listing and mutation go through those so each one can pick
    its own ordering and guarded update.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository with model type and database session.

        Args:
            model: The SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def create(self, obj_data: Dict[str, Any]) -> ModelType:
        """
        Stage a new record and flush it so its id is available.

        Args:
            obj_data: Dictionary of field values

        Returns:
            Created model instance
        """
        db_obj = self.model(**obj_data)
        self.db.add(db_obj)
        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    async def get(self, id: int) -> Optional[ModelType]:
        """
        Get a single record by ID.

        Args:
            id: Primary key value

        Returns:
            Model instance or None if not found
        """
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def exists(self, id: int) -> bool:
        """Check if record exists by ID."""
        result = await self.db.execute(select(self.model.id).where(self.model.id == id))
        return result.first() is not None
