"""Shared test fixtures for all test groups.

Database-backed tests run against SQLite (aiosqlite) in a temporary file
unless TEST_DATABASE_URL points at a PostgreSQL test database.
"""

import os

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from land_journey.db.base import Base
from land_journey.integrations.marketplace import EngagementInfo
from land_journey.integrations.marketplace_fake import MarketplaceFake
from land_journey.services.land_journey_service import LandJourneyService
from tests.factories import BUYER_ID, make_professional, make_transaction


@pytest.fixture
def db_url(tmp_path) -> str:
    return os.getenv("TEST_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'land_journey_test.db'}")


@pytest.fixture
async def engine(db_url: str) -> AsyncEngine:
    """Create the test engine with a fresh schema."""
    engine = create_async_engine(db_url, echo=False)

    # Import all models so metadata is populated
    import land_journey.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncSession:
    """Create an async session for tests."""
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def marketplace() -> MarketplaceFake:
    """MarketplaceFake seeded with one completed purchase and one engagement for the buyer."""
    return MarketplaceFake(
        transactions=[make_transaction()],
        engagements=[
            EngagementInfo(id="req_1", client_id=BUYER_ID, professional_id="pro_1", status="ACCEPTED"),
        ],
        professionals=[make_professional()],
    )


@pytest.fixture
async def service(session: AsyncSession, marketplace: MarketplaceFake) -> LandJourneyService:
    return LandJourneyService(session, marketplace)
