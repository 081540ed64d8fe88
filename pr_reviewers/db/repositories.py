"""SQLAlchemy implementations of the repository ports.

Each repository is bound to a single ``AsyncSession``; the unit of work in
``pr_reviewers.db.transaction`` decides the transaction boundaries.

Boundary rules:
- This module is the only place that queries the service tables.
- Writes use Core ``insert``/``update`` statements so conditional updates
  can check ``rowcount``.  Reads therefore use ``populate_existing`` to
  avoid returning stale identity-map objects.
- Uniqueness violations are translated into domain errors; every other
  database error propagates unchanged.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Any

from sqlalchemy import insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from pr_reviewers.db import models as db
from pr_reviewers.db.mappers import to_pull_request, to_team, to_user
from pr_reviewers.domain.entities import PullRequest, Team, User
from pr_reviewers.domain.errors import (
    NoCandidateError,
    PullRequestExistsError,
    PullRequestNotFoundError,
    ReviewerNotAssignedError,
    TeamExistsError,
    TeamNotFoundError,
    UserNotFoundError,
)
from pr_reviewers.domain.types import PullRequestID, PullRequestStatus, TeamName, UserID

logger = logging.getLogger(__name__)


def _fresh(stmt: Select[Any]) -> Select[Any]:
    return stmt.execution_options(populate_existing=True)


class SqlAlchemyUserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: UserID) -> User:
        row = (
            await self._session.execute(_fresh(select(db.UserModel).where(db.UserModel.user_id == user_id)))
        ).scalar_one_or_none()
        if row is None:
            raise UserNotFoundError(user_id)
        return to_user(row)

    async def get_users_by_team(self, team_name: TeamName) -> list[User]:
        stmt = (
            select(db.UserModel)
            .where(db.UserModel.team_name == team_name)
            .order_by(db.UserModel.user_id)
        )
        rows = (await self._session.execute(_fresh(stmt))).scalars().all()
        return [to_user(row) for row in rows]

    async def get_all(self) -> list[User]:
        stmt = select(db.UserModel).order_by(db.UserModel.user_id)
        rows = (await self._session.execute(_fresh(stmt))).scalars().all()
        return [to_user(row) for row in rows]

    async def upsert_members(self, team_name: TeamName, members: Sequence[User]) -> None:
        if not members:
            return

        dialect = self._session.bind.dialect.name if self._session.bind is not None else "sqlite"
        dialect_insert = postgresql.insert if dialect == "postgresql" else sqlite.insert

        stmt = dialect_insert(db.UserModel).values(
            [
                {
                    "user_id": member.user_id,
                    "username": member.username,
                    "team_name": team_name,
                    "is_active": member.is_active,
                }
                for member in members
            ]
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[db.UserModel.user_id],
            set_={
                "username": stmt.excluded.username,
                "team_name": stmt.excluded.team_name,
                "is_active": stmt.excluded.is_active,
            },
        )
        await self._session.execute(stmt)
        logger.debug("Upserted %d members into team %s", len(members), team_name)

    async def set_is_active(self, user_id: UserID, is_active: bool) -> User:
        result = await self._session.execute(
            update(db.UserModel)
            .where(db.UserModel.user_id == user_id)
            .values(is_active=is_active)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise UserNotFoundError(user_id)
        return await self.get_by_id(user_id)


class SqlAlchemyTeamRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, team: Team) -> None:
        try:
            await self._session.execute(insert(db.TeamModel).values(team_name=team.name))
        except IntegrityError as exc:
            raise TeamExistsError(team.name) from exc

    async def get_by_name(self, team_name: TeamName) -> Team:
        row = (
            await self._session.execute(
                _fresh(select(db.TeamModel).where(db.TeamModel.team_name == team_name))
            )
        ).scalar_one_or_none()
        if row is None:
            raise TeamNotFoundError(team_name)
        return to_team(row)

    async def get_all(self) -> list[Team]:
        rows = (
            await self._session.execute(_fresh(select(db.TeamModel).order_by(db.TeamModel.team_name)))
        ).scalars().all()
        return [to_team(row) for row in rows]


class SqlAlchemyPullRequestRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _reviewers_for(self, pull_request_ids: Sequence[str]) -> dict[str, list[str]]:
        reviewers: dict[str, list[str]] = defaultdict(list)
        if not pull_request_ids:
            return reviewers
        stmt = (
            select(db.PullRequestReviewerModel.pull_request_id, db.PullRequestReviewerModel.user_id)
            .where(db.PullRequestReviewerModel.pull_request_id.in_(pull_request_ids))
            .order_by(db.PullRequestReviewerModel.pull_request_id, db.PullRequestReviewerModel.position)
        )
        for pull_request_id, user_id in (await self._session.execute(stmt)).all():
            reviewers[pull_request_id].append(user_id)
        return reviewers

    async def _hydrate(self, rows: Sequence[db.PullRequestModel]) -> list[PullRequest]:
        reviewers = await self._reviewers_for([row.pull_request_id for row in rows])
        return [to_pull_request(row, reviewers.get(row.pull_request_id, [])) for row in rows]

    async def create(self, pull_request: PullRequest) -> None:
        try:
            await self._session.execute(
                insert(db.PullRequestModel).values(
                    pull_request_id=pull_request.pull_request_id,
                    pull_request_name=pull_request.name,
                    author_id=pull_request.author_id,
                    status=pull_request.status.value,
                    created_at=pull_request.created_at,
                    merged_at=pull_request.merged_at,
                )
            )
        except IntegrityError as exc:
            raise PullRequestExistsError(pull_request.pull_request_id) from exc

        reviewers = pull_request.reviewers
        if reviewers:
            await self._session.execute(
                insert(db.PullRequestReviewerModel).values(
                    [
                        {
                            "pull_request_id": pull_request.pull_request_id,
                            "user_id": user_id,
                            "position": position,
                        }
                        for position, user_id in enumerate(reviewers)
                    ]
                )
            )

    async def save(self, pull_request: PullRequest) -> None:
        result = await self._session.execute(
            update(db.PullRequestModel)
            .where(
                db.PullRequestModel.pull_request_id == pull_request.pull_request_id,
                db.PullRequestModel.status == PullRequestStatus.OPEN.value,
            )
            .values(status=pull_request.status.value, merged_at=pull_request.merged_at)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.debug("PR %s was not OPEN; save skipped", pull_request.pull_request_id)

    async def get_by_id(self, pull_request_id: PullRequestID) -> PullRequest:
        row = (
            await self._session.execute(
                _fresh(
                    select(db.PullRequestModel).where(
                        db.PullRequestModel.pull_request_id == pull_request_id
                    )
                )
            )
        ).scalar_one_or_none()
        if row is None:
            raise PullRequestNotFoundError(pull_request_id)
        return (await self._hydrate([row]))[0]

    async def get_by_reviewer(self, user_id: UserID) -> list[PullRequest]:
        reviewed = select(db.PullRequestReviewerModel.pull_request_id).where(
            db.PullRequestReviewerModel.user_id == user_id
        )
        stmt = (
            select(db.PullRequestModel)
            .where(db.PullRequestModel.pull_request_id.in_(reviewed))
            .order_by(db.PullRequestModel.created_at, db.PullRequestModel.pull_request_id)
        )
        rows = (await self._session.execute(_fresh(stmt))).scalars().all()
        return await self._hydrate(rows)

    async def get_all(self) -> list[PullRequest]:
        stmt = select(db.PullRequestModel).order_by(
            db.PullRequestModel.created_at, db.PullRequestModel.pull_request_id
        )
        rows = (await self._session.execute(_fresh(stmt))).scalars().all()
        return await self._hydrate(rows)

    async def reassign_reviewer(
        self,
        pull_request_id: PullRequestID,
        old_reviewer_id: UserID,
        new_reviewer_id: UserID,
    ) -> None:
        try:
            result = await self._session.execute(
                update(db.PullRequestReviewerModel)
                .where(
                    db.PullRequestReviewerModel.pull_request_id == pull_request_id,
                    db.PullRequestReviewerModel.user_id == old_reviewer_id,
                )
                .values(user_id=new_reviewer_id)
                .execution_options(synchronize_session=False)
            )
        except IntegrityError as exc:
            # new_reviewer_id already holds another slot on this PR
            raise NoCandidateError(pull_request_id) from exc
        if result.rowcount == 0:
            raise ReviewerNotAssignedError(pull_request_id, old_reviewer_id)
