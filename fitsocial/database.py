"""
Database configuration and session management.

Provides the declarative base shared by every model, the async engine, the
session factory and the FastAPI session dependency.
"""

import logging
from datetime import datetime
from typing import AsyncGenerator

from sqlalchemy import DateTime, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from fitsocial.config import settings

logger = logging.getLogger("database")


class Base(DeclarativeBase):
    """
    Base model class for all database models.

    Provides:
    - Primary key (id)
    - Created/updated timestamps
    - String representation
    """

    # Fetch server-generated timestamps on INSERT and UPDATE
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


def create_engine_from_settings():
    """Create the async engine from application settings."""
    database_url = settings.database_url_with_ssl

    engine_kwargs = {"echo": settings.debug}

    # SQLite (local runs) does not take pool sizing arguments
    if not database_url.startswith("sqlite"):
        engine_kwargs.update(
            {
                "pool_size": settings.database_pool_size,
                "max_overflow": settings.database_max_overflow,
                "pool_pre_ping": True,
                "pool_recycle": 3600,
            }
        )

    if settings.is_aws_environment:
        engine_kwargs["pool_timeout"] = 30
        logger.info("Using deployed database configuration")

    return create_async_engine(database_url, **engine_kwargs)


engine = create_engine_from_settings()

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting a database session.

    @app.get("/users")
    async def get_users(db: AsyncSession = Depends(get_db)):
        ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """Create all tables."""
    async with engine.begin() as conn:
        import fitsocial.models  # noqa: F401

        await conn.run_sync(Base.metadata.create_all)
