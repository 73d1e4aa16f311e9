"""API-specific test fixtures."""

from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from land_journey.api.routes.land_journey import get_marketplace
from land_journey.core.auth import AuthUser, require_auth
from tests.factories import BUYER_ID, OTHER_USER_ID


@pytest.fixture
def api_client(db_url, marketplace):
    """FastAPI test client with test database and MarketplaceFake.

    Initializes the global database via init_db inside the TestClient's
    own event loop so route handlers can use get_session_factory().
    """
    from fastapi.middleware.cors import CORSMiddleware

    from land_journey.api.routes import api_router
    from land_journey.core.config import get_settings
    from land_journey.db import close_db, init_db
    from land_journey.main import register_exception_handlers
    from land_journey.middleware.correlation import setup_correlation_middleware

    @asynccontextmanager
    async def test_lifespan(app: FastAPI):
        """Test lifespan - initialize DB in TestClient's event loop."""
        # Reset global so init_db creates a fresh engine in THIS loop
        import land_journey.db.base as db_mod

        db_mod._engine = None
        db_mod._session_factory = None
        await init_db(db_url)
        yield
        await close_db()

    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Land Journey Engine - Test Client",
        version="0.1.0",
        lifespan=test_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_correlation_middleware(app)

    # Exception handlers (needed for error code and debug_id assertions)
    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    app.dependency_overrides[get_marketplace] = lambda: marketplace

    with TestClient(app) as client:
        yield client


@pytest.fixture
def user_a():
    """The buyer who owns the seeded marketplace records."""
    return AuthUser(user_id=BUYER_ID, claims={"sub": BUYER_ID})


@pytest.fixture
def user_b():
    """A different user."""
    return AuthUser(user_id=OTHER_USER_ID, claims={"sub": OTHER_USER_ID})


def override_auth(user: AuthUser):
    """Create auth override for a specific user."""

    async def _override():
        return user

    return _override


@pytest.fixture
def as_user(api_client):
    """Switch the authenticated user for subsequent requests."""

    def _as_user(user: AuthUser) -> TestClient:
        api_client.app.dependency_overrides[require_auth] = override_auth(user)
        return api_client

    return _as_user
