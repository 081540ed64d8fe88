"""Request bodies for the HTTP API."""
from __future__ import annotations

from pydantic import AliasChoices, Field

from pr_reviewers.models.base import WireModel


class TeamMemberIn(WireModel):
    user_id: str = Field(..., min_length=1, description="User ID")
    username: str = Field(..., min_length=1, description="Display name")
    is_active: bool = Field(..., description="Whether the user may author and review")


class TeamCreate(WireModel):
    """Body for POST /team/add."""

    team_name: str = Field(..., min_length=1, description="Unique team name")
    members: list[TeamMemberIn] = Field(..., min_length=1, description="Team members to upsert")


class SetIsActiveRequest(WireModel):
    """Body for POST /users/setIsActive."""

    user_id: str = Field(..., min_length=1)
    is_active: bool


class PullRequestCreate(WireModel):
    """Body for POST /pullRequest/create."""

    pull_request_id: str = Field(..., min_length=1)
    pull_request_name: str = Field(..., min_length=1)
    author_id: str = Field(..., min_length=1)


class PullRequestMerge(WireModel):
    """Body for POST /pullRequest/merge."""

    pull_request_id: str = Field(..., min_length=1)


class PullRequestReassign(WireModel):
    """Body for POST /pullRequest/reassign.

    ``old_user_id`` is accepted as an alias of ``old_reviewer_id``.
    """

    pull_request_id: str = Field(..., min_length=1)
    old_reviewer_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("old_reviewer_id", "old_user_id"),
    )
