"""Pytest configuration and fixtures."""
import logging
from datetime import datetime, timezone

import pytest
import pytest_asyncio


def pytest_configure(config):
    """Ensure asyncio_mode is auto so async fixtures work when pyproject is not in cwd."""
    if hasattr(config.option, "asyncio_mode") and config.option.asyncio_mode is None:
        config.option.asyncio_mode = "auto"
    logging.getLogger("httpcore").setLevel(logging.CRITICAL)


from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from pr_reviewers.api.dependencies import get_random_provider, get_time_provider
from pr_reviewers.main import app
from pr_reviewers.db import database
from pr_reviewers.db import models  # noqa: F401
from pr_reviewers.db.database import Base, create_engine_for_url, get_db
from tests.fakes import FixedClock, ScriptedRandom

FIXED_NOW = datetime(2025, 11, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(FIXED_NOW)


@pytest.fixture
def rng() -> ScriptedRandom:
    return ScriptedRandom()


@pytest_asyncio.fixture
async def db_session(clock, rng):
    """Create an in-memory test database session.

    The app's ``get_db`` and the time/random providers are overridden so
    API tests see this session and deterministic reviewer picks.
    """
    engine = create_engine_for_url(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    old_engine = database._engine
    old_factory = database._async_session_factory
    database._engine = engine
    database._async_session_factory = async_session_factory
    try:
        async with async_session_factory() as session:
            async def override_get_db():
                yield session
            app.dependency_overrides[get_db] = override_get_db
            app.dependency_overrides[get_time_provider] = lambda: clock
            app.dependency_overrides[get_random_provider] = lambda: rng
            yield session
            app.dependency_overrides.clear()
    finally:
        database._engine = old_engine
        database._async_session_factory = old_factory
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session):
    """Create an async test client bound to the test database."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
