"""User route handlers.

Endpoint summary:
  POST /users/setIsActive : toggle a user's active flag
  GET  /users/getReview   : pull requests a user reviews
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from pr_reviewers.api.dependencies import get_user_service
from pr_reviewers.api.errors import MISSING_USER_ID, APIError
from pr_reviewers.domain.types import UserID
from pr_reviewers.models.requests import SetIsActiveRequest
from pr_reviewers.models.responses import (
    UserResponse,
    UserReviewsResponse,
    to_pull_request_short,
    to_user_response,
)
from pr_reviewers.services.users import UserService

router = APIRouter()


@router.post(
    "/users/setIsActive",
    response_model=UserResponse,
    operation_id="setUserIsActive",
    summary="Set a user's active flag",
)
async def set_is_active(
    body: SetIsActiveRequest,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = await service.set_active_status(UserID(body.user_id), body.is_active)
    return to_user_response(user)


@router.get(
    "/users/getReview",
    response_model=UserReviewsResponse,
    operation_id="getUserReviews",
    summary="List pull requests assigned to a reviewer",
)
async def get_user_reviews(
    user_id: str | None = Query(None, description="Reviewer user ID"),
    service: UserService = Depends(get_user_service),
) -> UserReviewsResponse:
    """Returns 404 for an unknown user, an empty list for a user with no reviews."""
    if not user_id:
        raise APIError(status.HTTP_400_BAD_REQUEST, MISSING_USER_ID)
    pull_requests = await service.get_user_reviews(UserID(user_id))
    return UserReviewsResponse(
        user_id=user_id,
        pull_requests=[to_pull_request_short(pr) for pr in pull_requests],
    )
