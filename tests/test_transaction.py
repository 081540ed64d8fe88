"""Tests for SessionTransactionManager: commit, rollback, timeout, cancellation."""
from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from pr_reviewers.db.repositories import SqlAlchemyTeamRepository
from pr_reviewers.db.transaction import SessionTransactionManager
from pr_reviewers.domain.entities import Team
from pr_reviewers.domain.errors import TeamExistsError, TeamNotFoundError
from pr_reviewers.domain.types import TeamName
from pr_reviewers.services.ports import TransactionManager


async def _team_exists(session: AsyncSession, name: str) -> bool:
    try:
        await SqlAlchemyTeamRepository(session).get_by_name(TeamName(name))
    except TeamNotFoundError:
        return False
    return True


def test_satisfies_port() -> None:
    session = MagicMock(spec=AsyncSession)
    assert isinstance(SessionTransactionManager(session), TransactionManager)


@pytest.mark.asyncio
async def test_commits_and_returns_result(db_session: AsyncSession) -> None:
    tx = SessionTransactionManager(db_session)
    teams = SqlAlchemyTeamRepository(db_session)

    async def _op() -> str:
        await teams.create(Team(TeamName("backend")))
        return "done"

    assert await tx.run(_op) == "done"
    assert not db_session.in_transaction()
    assert await _team_exists(db_session, "backend")


@pytest.mark.asyncio
async def test_error_rolls_back_every_write(db_session: AsyncSession) -> None:
    tx = SessionTransactionManager(db_session)
    teams = SqlAlchemyTeamRepository(db_session)

    async def _op() -> None:
        await teams.create(Team(TeamName("backend")))
        await teams.create(Team(TeamName("backend")))

    with pytest.raises(TeamExistsError):
        await tx.run(_op)
    assert not await _team_exists(db_session, "backend")


@pytest.mark.asyncio
async def test_nested_rollback_keeps_outer_work(db_session: AsyncSession) -> None:
    teams = SqlAlchemyTeamRepository(db_session)
    await teams.create(Team(TeamName("outer")))
    assert db_session.in_transaction()

    async def _op() -> None:
        await teams.create(Team(TeamName("inner")))
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await SessionTransactionManager(db_session).run(_op)

    assert await _team_exists(db_session, "outer")
    assert not await _team_exists(db_session, "inner")


@pytest.mark.asyncio
async def test_timeout_rolls_back(db_session: AsyncSession) -> None:
    tx = SessionTransactionManager(db_session, timeout=0.05)
    teams = SqlAlchemyTeamRepository(db_session)

    async def _slow() -> None:
        await teams.create(Team(TeamName("slow")))
        await asyncio.sleep(5)

    with pytest.raises(asyncio.TimeoutError):
        await tx.run(_slow)
    assert not await _team_exists(db_session, "slow")


@pytest.mark.asyncio
async def test_cancellation_rolls_back(db_session: AsyncSession) -> None:
    tx = SessionTransactionManager(db_session)
    teams = SqlAlchemyTeamRepository(db_session)
    started = asyncio.Event()

    async def _blocked() -> None:
        await teams.create(Team(TeamName("cancelled")))
        started.set()
        await asyncio.sleep(5)

    task = asyncio.create_task(tx.run(_blocked))
    await started.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert not await _team_exists(db_session, "cancelled")
