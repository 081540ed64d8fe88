"""FastAPI dependencies that assemble services for one request.

Every request gets repositories and a unit of work bound to its own
``AsyncSession``; nothing mutable is shared between requests.  The time
and random providers are process-wide and stateless from the caller's
point of view.
"""
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pr_reviewers.config import settings
from pr_reviewers.db import get_db
from pr_reviewers.db.repositories import (
    SqlAlchemyPullRequestRepository,
    SqlAlchemyTeamRepository,
    SqlAlchemyUserRepository,
)
from pr_reviewers.db.transaction import SessionTransactionManager
from pr_reviewers.services import PullRequestService, StatsService, TeamService, UserService
from pr_reviewers.services.ports import RandomProvider, TimeProvider
from pr_reviewers.services.providers import SystemRandomProvider, SystemTimeProvider


def get_time_provider() -> TimeProvider:
    return SystemTimeProvider()


@lru_cache()
def get_random_provider() -> RandomProvider:
    return SystemRandomProvider(seed=settings.random_seed)


def _transactions(db: AsyncSession) -> SessionTransactionManager:
    return SessionTransactionManager(db, timeout=settings.transaction_timeout_seconds)


def get_pull_request_service(
    db: AsyncSession = Depends(get_db),
    clock: TimeProvider = Depends(get_time_provider),
    rng: RandomProvider = Depends(get_random_provider),
) -> PullRequestService:
    return PullRequestService(
        users=SqlAlchemyUserRepository(db),
        teams=SqlAlchemyTeamRepository(db),
        pull_requests=SqlAlchemyPullRequestRepository(db),
        transactions=_transactions(db),
        clock=clock,
        rng=rng,
    )


def get_team_service(db: AsyncSession = Depends(get_db)) -> TeamService:
    return TeamService(
        teams=SqlAlchemyTeamRepository(db),
        users=SqlAlchemyUserRepository(db),
        transactions=_transactions(db),
    )


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(
        users=SqlAlchemyUserRepository(db),
        pull_requests=SqlAlchemyPullRequestRepository(db),
    )


def get_stats_service(db: AsyncSession = Depends(get_db)) -> StatsService:
    return StatsService(
        users=SqlAlchemyUserRepository(db),
        teams=SqlAlchemyTeamRepository(db),
        pull_requests=SqlAlchemyPullRequestRepository(db),
    )
