"""Seed demo teams, users and pull requests through the services.

Creates two teams (backend, frontend) with a mix of active and inactive
members, opens a handful of pull requests so reviewers get assigned, and
merges one of them.

Idempotent: teams or pull requests that already exist are skipped.

Run after migrations:
  alembic upgrade head
  python3 scripts/seed_demo.py
"""
from __future__ import annotations

import asyncio
import logging

from pr_reviewers.db import AsyncSessionLocal, close_db, init_db
from pr_reviewers.db.repositories import (
    SqlAlchemyPullRequestRepository,
    SqlAlchemyTeamRepository,
    SqlAlchemyUserRepository,
)
from pr_reviewers.db.transaction import SessionTransactionManager
from pr_reviewers.domain.entities import User
from pr_reviewers.domain.errors import PullRequestExistsError, TeamExistsError
from pr_reviewers.domain.types import PullRequestID, TeamName, UserID
from pr_reviewers.services import PullRequestService, TeamService
from pr_reviewers.services.providers import SystemRandomProvider, SystemTimeProvider

logger = logging.getLogger(__name__)

TEAMS: dict[str, list[tuple[str, str, bool]]] = {
    "backend": [
        ("u1", "Alice", True),
        ("u2", "Bob", True),
        ("u3", "Carol", True),
        ("u4", "Dave", False),
    ],
    "frontend": [
        ("u5", "Erin", True),
        ("u6", "Frank", True),
    ],
}

PULL_REQUESTS: list[tuple[str, str, str]] = [
    ("pr-1001", "Add search endpoint", "u1"),
    ("pr-1002", "Fix login redirect", "u5"),
    ("pr-1003", "Cache team lookups", "u2"),
]


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    await init_db()
    try:
        async with AsyncSessionLocal() as session:
            users = SqlAlchemyUserRepository(session)
            teams = SqlAlchemyTeamRepository(session)
            pull_requests = SqlAlchemyPullRequestRepository(session)
            transactions = SessionTransactionManager(session)

            team_service = TeamService(teams, users, transactions)
            pr_service = PullRequestService(
                users,
                teams,
                pull_requests,
                transactions,
                SystemTimeProvider(),
                SystemRandomProvider(),
            )

            for team_name, members in TEAMS.items():
                try:
                    await team_service.create(
                        TeamName(team_name),
                        [
                            User(UserID(user_id), username, TeamName(team_name), active)
                            for user_id, username, active in members
                        ],
                    )
                except TeamExistsError:
                    logger.info("Team %s already seeded", team_name)

            for pr_id, name, author in PULL_REQUESTS:
                try:
                    pr = await pr_service.create(PullRequestID(pr_id), name, UserID(author))
                    logger.info("%s reviewers: %s", pr_id, pr.reviewers)
                except PullRequestExistsError:
                    logger.info("PR %s already seeded", pr_id)

            await pr_service.merge(PullRequestID("pr-1002"))
            await session.commit()
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
