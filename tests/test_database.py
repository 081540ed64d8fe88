"""
Tests for pr_reviewers.db.database: get_database_url, init_db, close_db, get_db.
"""
from __future__ import annotations

import pytest
from unittest.mock import patch

from sqlalchemy import text


def test_get_database_url_uses_settings() -> None:
    """get_database_url returns settings.database_url when set."""
    from pr_reviewers.db import database
    with patch.object(database.settings, "database_url", "postgresql+asyncpg://localhost/prs"):
        assert database.get_database_url() == "postgresql+asyncpg://localhost/prs"


def test_get_database_url_defaults_to_sqlite_when_none() -> None:
    """get_database_url returns a SQLite path when settings.database_url is None."""
    from pr_reviewers.db import database
    with patch.object(database.settings, "database_url", None):
        url = database.get_database_url()
        assert url.startswith("sqlite+aiosqlite://")
        assert "pr_reviewers.db" in url


@pytest.mark.asyncio
async def test_init_db_and_close_db_lifecycle() -> None:
    """init_db creates engine and session factory; close_db disposes them."""
    from pr_reviewers.db import database
    with patch.object(database.settings, "database_url", "sqlite+aiosqlite:///:memory:"):
        with patch.object(database.settings, "debug", False):
            await database.init_db()
            assert database._engine is not None
            assert database._async_session_factory is not None
            await database.close_db()
            assert database._engine is None
            assert database._async_session_factory is None


@pytest.mark.asyncio
async def test_get_db_raises_when_not_initialized() -> None:
    """get_db raises RuntimeError when init_db has not been called."""
    from pr_reviewers.db.database import get_db

    with patch("pr_reviewers.db.database._async_session_factory", None):
        gen = get_db()
        with pytest.raises(RuntimeError, match="Database not initialized"):
            await gen.__anext__()


def test_async_session_local_raises_when_not_initialized() -> None:
    from pr_reviewers.db.database import AsyncSessionLocal

    with patch("pr_reviewers.db.database._async_session_factory", None):
        with pytest.raises(RuntimeError, match="Database not initialized"):
            AsyncSessionLocal()


@pytest.mark.asyncio
async def test_sqlite_engine_supports_savepoints() -> None:
    """SQLite engines emit BEGIN eagerly so nested transactions work."""
    from pr_reviewers.db.database import create_engine_for_url

    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")
    try:
        async with engine.connect() as conn:
            await conn.execute(text("CREATE TABLE t (x INTEGER)"))
            await conn.commit()
            async with conn.begin():
                await conn.execute(text("INSERT INTO t VALUES (1)"))
                nested = await conn.begin_nested()
                await conn.execute(text("INSERT INTO t VALUES (2)"))
                await nested.rollback()
            rows = (await conn.execute(text("SELECT x FROM t"))).scalars().all()
        assert rows == [1]
    finally:
        await engine.dispose()
