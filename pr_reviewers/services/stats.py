"""Read-side aggregation over users, teams and pull requests."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from pr_reviewers.domain.types import PullRequestID, PullRequestStatus, TeamName, UserID
from pr_reviewers.services.ports import PullRequestRepository, TeamRepository, UserRepository


@dataclass(frozen=True)
class UserStats:
    user_id: UserID
    username: str
    team_name: TeamName
    prs_created: int


@dataclass(frozen=True)
class TeamStats:
    team_name: TeamName
    member_count: int
    active_members: int
    prs_count: int


@dataclass(frozen=True)
class ReviewAssignment:
    pr_id: PullRequestID
    pr_name: str
    author_id: UserID
    status: PullRequestStatus


@dataclass(frozen=True)
class Stats:
    total_prs: int = 0
    open_prs: int = 0
    merged_prs: int = 0
    users_stats: list[UserStats] = field(default_factory=list)
    teams_stats: list[TeamStats] = field(default_factory=list)
    review_assignments: list[ReviewAssignment] = field(default_factory=list)


class StatsService:
    def __init__(
        self,
        users: UserRepository,
        teams: TeamRepository,
        pull_requests: PullRequestRepository,
    ) -> None:
        self._users = users
        self._teams = teams
        self._pull_requests = pull_requests

    async def get_stats(self) -> Stats:
        """Compute counts per status, per user and per team.

        A team's ``prs_count`` counts pull requests authored by its current
        members.  Any read failure propagates unchanged.
        """
        users = await self._users.get_all()
        teams = await self._teams.get_all()
        pull_requests = await self._pull_requests.get_all()

        authored = Counter(pr.author_id for pr in pull_requests)
        merged = sum(1 for pr in pull_requests if pr.is_merged)

        users_stats = [
            UserStats(
                user_id=user.user_id,
                username=user.username,
                team_name=user.team_name,
                prs_created=authored[user.user_id],
            )
            for user in users
        ]

        teams_stats = []
        for team in teams:
            members = [user for user in users if user.team_name == team.name]
            teams_stats.append(
                TeamStats(
                    team_name=team.name,
                    member_count=len(members),
                    active_members=sum(1 for user in members if user.is_active),
                    prs_count=sum(authored[user.user_id] for user in members),
                )
            )

        review_assignments = [
            ReviewAssignment(
                pr_id=pr.pull_request_id,
                pr_name=pr.name,
                author_id=pr.author_id,
                status=pr.status,
            )
            for pr in pull_requests
        ]

        return Stats(
            total_prs=len(pull_requests),
            open_prs=len(pull_requests) - merged,
            merged_prs=merged,
            users_stats=users_stats,
            teams_stats=teams_stats,
            review_assignments=review_assignments,
        )
