"""Unit of work bound to an ``AsyncSession``."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionTransactionManager:
    """Run an operation atomically on one session.

    Opens ``session.begin()``, or a SAVEPOINT via ``begin_nested()`` when the
    session already has a transaction in progress, so the operation's writes
    are discarded on failure without touching earlier work.  With a
    ``timeout`` the operation is cancelled after that many seconds and
    ``TimeoutError`` is raised once the rollback has finished.
    """

    def __init__(self, session: AsyncSession, timeout: float | None = None) -> None:
        self._session = session
        self._timeout = timeout

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        if self._session.in_transaction():
            scope = self._session.begin_nested()
        else:
            scope = self._session.begin()

        try:
            async with scope:
                if self._timeout is None:
                    return await operation()
                return await asyncio.wait_for(operation(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("Transaction timed out after %ss; rolled back", self._timeout)
            raise
        except asyncio.CancelledError:
            logger.warning("Transaction cancelled; rolled back")
            raise
