"""Conversion between ORM rows and domain entities."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from pr_reviewers.db import models as db
from pr_reviewers.domain.entities import PullRequest, Team, User
from pr_reviewers.domain.types import PullRequestID, PullRequestStatus, TeamName, UserID


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def to_user(row: db.UserModel) -> User:
    return User(
        user_id=UserID(row.user_id),
        username=row.username,
        team_name=TeamName(row.team_name),
        is_active=row.is_active,
    )


def to_team(row: db.TeamModel) -> Team:
    return Team(name=TeamName(row.team_name))


def to_pull_request(row: db.PullRequestModel, reviewers: Sequence[str]) -> PullRequest:
    return PullRequest(
        pull_request_id=PullRequestID(row.pull_request_id),
        name=row.pull_request_name,
        author_id=UserID(row.author_id),
        created_at=_as_utc(row.created_at),
        reviewers=[UserID(user_id) for user_id in reviewers],
        status=PullRequestStatus(row.status),
        merged_at=_as_utc(row.merged_at) if row.merged_at is not None else None,
    )
