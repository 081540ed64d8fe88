"""Domain layer: identifiers, entities and the error taxonomy."""
from __future__ import annotations

from pr_reviewers.domain.entities import PullRequest, Team, User
from pr_reviewers.domain.types import (
    MAX_REVIEWERS,
    PullRequestID,
    PullRequestStatus,
    TeamName,
    UserID,
)

__all__ = [
    "MAX_REVIEWERS",
    "PullRequest",
    "PullRequestID",
    "PullRequestStatus",
    "Team",
    "TeamName",
    "User",
    "UserID",
]
