"""
Async SQLAlchemy database setup.

Supports PostgreSQL (production) and SQLite (development and tests).
"""
from __future__ import annotations

import logging
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from pr_reviewers.config import settings as settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""
    pass


# Global engine and session factory (initialized on startup)
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_database_url() -> str:
    """Get the database URL from settings."""
    url = settings.database_url
    if not url:
        # Default to SQLite for development
        url = "sqlite+aiosqlite:///./pr_reviewers.db"
        logger.warning(f"No database URL configured, using SQLite: {url}")
    return url


def enable_sqlite_transactions(engine: AsyncEngine) -> None:
    """Make pysqlite emit BEGIN itself so transactions and SAVEPOINTs are real.

    The sqlite3 driver otherwise defers BEGIN until the first DML statement,
    which breaks ``begin_nested()`` and leaves reads outside the transaction.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def create_engine_for_url(database_url: str, **kwargs: Any) -> AsyncEngine:
    """Create an async engine, applying SQLite-specific connection setup."""
    connect_args: dict[str, Any] = kwargs.pop("connect_args", {})
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        connect_args.setdefault("check_same_thread", False)

    engine = create_async_engine(database_url, connect_args=connect_args, **kwargs)
    if is_sqlite:
        enable_sqlite_transactions(engine)
    return engine


async def init_db() -> None:
    """Initialize database engine and session factory.

    Schema is managed by Alembic (``alembic upgrade head`` runs before the
    app starts).  This function only creates the async engine and session
    factory.
    """
    global _engine, _async_session_factory

    database_url = get_database_url()
    logger.info(f"Initializing database: {database_url.split('@')[-1] if '@' in database_url else database_url}")

    _engine = create_engine_for_url(database_url, echo=settings.debug)

    _async_session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Import models so they register with Base.metadata.
    from pr_reviewers.db import models  # noqa: F401

    logger.info("Database initialized successfully")


async def close_db() -> None:
    """Close database connection."""
    global _engine, _async_session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.info("Database connection closed")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database sessions.

    Usage:
        @router.get("/team/get")
        async def get_team(db: AsyncSession = Depends(get_db)):
            ...
    """
    if _async_session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with _async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def AsyncSessionLocal() -> AsyncSession:
    """
    Get a new async session directly (for non-FastAPI contexts).

    Usage:
        async with AsyncSessionLocal() as session:
            ...
    """
    if _async_session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _async_session_factory()
