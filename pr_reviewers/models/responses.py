"""Response bodies for the HTTP API, plus entity → wire mappers."""
from __future__ import annotations

from datetime import datetime

from pydantic import field_serializer

from pr_reviewers.domain.entities import PullRequest, Team, User
from pr_reviewers.models.base import WireModel, format_timestamp
from pr_reviewers.services.stats import Stats


class TeamMemberOut(WireModel):
    user_id: str
    username: str
    is_active: bool


class TeamResponse(WireModel):
    team_name: str
    members: list[TeamMemberOut]


class UserResponse(WireModel):
    user_id: str
    username: str
    team_name: str
    is_active: bool


class PullRequestResponse(WireModel):
    """Full pull request. ``merged_at`` is omitted while OPEN."""

    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str
    assigned_reviewers: list[str]
    created_at: datetime
    merged_at: datetime | None = None

    @field_serializer("created_at", "merged_at")
    def _serialize_timestamp(self, value: datetime | None) -> str | None:
        return format_timestamp(value) if value is not None else None


class PullRequestShort(WireModel):
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str


class ReassignResponse(WireModel):
    pr: PullRequestResponse
    replaced_by: str


class UserReviewsResponse(WireModel):
    user_id: str
    pull_requests: list[PullRequestShort]


class UserStatsOut(WireModel):
    user_id: str
    username: str
    prs_created: int
    team_name: str


class TeamStatsOut(WireModel):
    team_name: str
    member_count: int
    active_members: int
    prs_count: int


class ReviewAssignmentOut(WireModel):
    pr_id: str
    pr_name: str
    author_id: str
    status: str


class StatsResponse(WireModel):
    total_prs: int
    open_prs: int
    merged_prs: int
    users_stats: list[UserStatsOut]
    teams_stats: list[TeamStatsOut]
    review_assignments: list[ReviewAssignmentOut]


class ErrorDetail(WireModel):
    code: str
    message: str


class ErrorResponse(WireModel):
    error: ErrorDetail


class HealthResponse(WireModel):
    status: str
    service: str
    version: str


# ---------------------------------------------------------------------------
# Mappers
# ---------------------------------------------------------------------------


def to_team_response(team: Team, members: list[User]) -> TeamResponse:
    return TeamResponse(
        team_name=team.name,
        members=[
            TeamMemberOut(user_id=m.user_id, username=m.username, is_active=m.is_active)
            for m in members
        ],
    )


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        user_id=user.user_id,
        username=user.username,
        team_name=user.team_name,
        is_active=user.is_active,
    )


def to_pull_request_response(pull_request: PullRequest) -> PullRequestResponse:
    return PullRequestResponse(
        pull_request_id=pull_request.pull_request_id,
        pull_request_name=pull_request.name,
        author_id=pull_request.author_id,
        status=pull_request.status.value,
        assigned_reviewers=pull_request.reviewers,
        created_at=pull_request.created_at,
        merged_at=pull_request.merged_at,
    )


def to_pull_request_short(pull_request: PullRequest) -> PullRequestShort:
    return PullRequestShort(
        pull_request_id=pull_request.pull_request_id,
        pull_request_name=pull_request.name,
        author_id=pull_request.author_id,
        status=pull_request.status.value,
    )


def to_stats_response(stats: Stats) -> StatsResponse:
    return StatsResponse(
        total_prs=stats.total_prs,
        open_prs=stats.open_prs,
        merged_prs=stats.merged_prs,
        users_stats=[
            UserStatsOut(
                user_id=s.user_id,
                username=s.username,
                prs_created=s.prs_created,
                team_name=s.team_name,
            )
            for s in stats.users_stats
        ],
        teams_stats=[
            TeamStatsOut(
                team_name=s.team_name,
                member_count=s.member_count,
                active_members=s.active_members,
                prs_count=s.prs_count,
            )
            for s in stats.teams_stats
        ],
        review_assignments=[
            ReviewAssignmentOut(
                pr_id=a.pr_id,
                pr_name=a.pr_name,
                author_id=a.author_id,
                status=a.status.value,
            )
            for a in stats.review_assignments
        ],
    )
