"""
Database module for PR Reviewers.

Provides async SQLAlchemy support with PostgreSQL and SQLite.
"""
from __future__ import annotations

from pr_reviewers.db.database import (
    get_db,
    init_db,
    close_db,
    AsyncSessionLocal,
)
from pr_reviewers.db.models import (
    PullRequestModel,
    PullRequestReviewerModel,
    TeamModel,
    UserModel,
)

__all__ = [
    "get_db",
    "init_db",
    "close_db",
    "AsyncSessionLocal",
    "PullRequestModel",
    "PullRequestReviewerModel",
    "TeamModel",
    "UserModel",
]
