"""
Shared test fixtures and configuration.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import fitsocial.models  # noqa: F401
from fitsocial.database import Base
from fitsocial.models.profile import BrandProfile, GymProfile, IndividualProfile
from fitsocial.models.user import User, UserKind


@pytest.fixture
def mock_db():
    """Mock database session."""
    return AsyncMock()


@pytest.fixture
def mock_redis():
    """Mock Redis client."""
    redis_mock = AsyncMock()
    redis_mock.ping = AsyncMock(return_value=True)
    redis_mock.get = AsyncMock(return_value=None)
    redis_mock.set = AsyncMock(return_value=True)
    redis_mock.setex = AsyncMock(return_value=True)
    redis_mock.delete = AsyncMock(return_value=1)
    redis_mock.keys = AsyncMock(return_value=[])
    return redis_mock


@pytest.fixture
def mock_cache_manager(mock_redis):
    """Cache manager wired to the mocked Redis client."""
    from fitsocial.core.cache import CacheManager

    cache = CacheManager()
    cache.redis_client = mock_redis
    return cache


@pytest.fixture
def mock_invalidator():
    invalidator = AsyncMock()
    invalidator.invalidate_for_event = AsyncMock(return_value=0)
    return invalidator


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Session over the in-memory test database."""
    SessionLocal = async_sessionmaker(db_engine, expire_on_commit=False)

    async with SessionLocal() as session:
        yield session


class ModelFactory:
    """Inserts committed rows for integration tests."""

    def __init__(self, session):
        self.session = session

    async def user(self, username, kind=None, **fields):
        user = User(
            external_id=f"test|{username}",
            username=username,
            email=f"{username}@example.com",
            kind=kind,
            follower_count=0,
            following_count=0,
            onboarding_complete=kind is not None,
            is_active=True,
            **fields,
        )
        self.session.add(user)
        await self.session.commit()
        return user

    async def individual(self, username, score=0, last_update=None, **profile_fields):
        user = await self.user(username, kind=UserKind.INDIVIDUAL)
        self.session.add(
            IndividualProfile(
                user_id=user.id,
                activity_score=score,
                last_activity_update=last_update or datetime.now(timezone.utc),
                **profile_fields,
            )
        )
        await self.session.commit()
        return user

    async def gym(self, username):
        user = await self.user(username, kind=UserKind.GYM)
        self.session.add(GymProfile(user_id=user.id, amenities=["pool"]))
        await self.session.commit()
        return user

    async def brand(self, username):
        user = await self.user(username, kind=UserKind.BRAND)
        self.session.add(BrandProfile(user_id=user.id))
        await self.session.commit()
        return user


@pytest.fixture
def factory(db_session):
    return ModelFactory(db_session)
