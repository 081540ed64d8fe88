"""Pull request route handlers.

Endpoint summary:
  POST /pullRequest/create   : open a PR and auto-assign up to two reviewers
  POST /pullRequest/merge    : merge a PR (idempotent)
  POST /pullRequest/reassign : replace one reviewer with a random teammate

No business logic lives here; everything is delegated to
pr_reviewers.services.pull_requests.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from pr_reviewers.api.dependencies import get_pull_request_service
from pr_reviewers.domain.types import PullRequestID, UserID
from pr_reviewers.models.requests import PullRequestCreate, PullRequestMerge, PullRequestReassign
from pr_reviewers.models.responses import (
    PullRequestResponse,
    ReassignResponse,
    to_pull_request_response,
)
from pr_reviewers.services.pull_requests import PullRequestService

router = APIRouter()


@router.post(
    "/pullRequest/create",
    response_model=PullRequestResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    operation_id="createPullRequest",
    summary="Create a pull request and assign reviewers",
)
async def create_pull_request(
    body: PullRequestCreate,
    service: PullRequestService = Depends(get_pull_request_service),
) -> PullRequestResponse:
    """Create an OPEN pull request.

    Up to two active teammates of the author are picked at random as
    reviewers.  Returns 404 if the author or their team is unknown, 409
    PR_EXISTS for a duplicate ID and 409 AUTHOR_NOT_ACTIVE for an inactive
    author.
    """
    pull_request = await service.create(
        PullRequestID(body.pull_request_id),
        body.pull_request_name,
        UserID(body.author_id),
    )
    return to_pull_request_response(pull_request)


@router.post(
    "/pullRequest/merge",
    response_model=PullRequestResponse,
    response_model_exclude_none=True,
    operation_id="mergePullRequest",
    summary="Mark a pull request as merged",
)
async def merge_pull_request(
    body: PullRequestMerge,
    service: PullRequestService = Depends(get_pull_request_service),
) -> PullRequestResponse:
    """Merging twice returns the original merge time."""
    pull_request = await service.merge(PullRequestID(body.pull_request_id))
    return to_pull_request_response(pull_request)


@router.post(
    "/pullRequest/reassign",
    response_model=ReassignResponse,
    response_model_exclude_none=True,
    operation_id="reassignReviewer",
    summary="Replace a reviewer with another active teammate",
)
async def reassign_reviewer(
    body: PullRequestReassign,
    service: PullRequestService = Depends(get_pull_request_service),
) -> ReassignResponse:
    pull_request, replaced_by = await service.reassign_reviewer(
        PullRequestID(body.pull_request_id),
        UserID(body.old_reviewer_id),
    )
    return ReassignResponse(pr=to_pull_request_response(pull_request), replaced_by=replaced_by)
