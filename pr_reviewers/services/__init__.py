"""Application services orchestrating entities, repositories and the unit of work."""
from __future__ import annotations

from pr_reviewers.services.pull_requests import PullRequestService
from pr_reviewers.services.stats import StatsService
from pr_reviewers.services.teams import TeamService
from pr_reviewers.services.users import UserService

__all__ = [
    "PullRequestService",
    "StatsService",
    "TeamService",
    "UserService",
]
