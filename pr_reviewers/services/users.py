"""User activity toggling and review lookup."""
from __future__ import annotations

import logging

from pr_reviewers.domain.entities import PullRequest, User
from pr_reviewers.domain.types import UserID
from pr_reviewers.services.ports import PullRequestRepository, UserRepository

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, users: UserRepository, pull_requests: PullRequestRepository) -> None:
        self._users = users
        self._pull_requests = pull_requests

    async def set_active_status(self, user_id: UserID, is_active: bool) -> User:
        """Raises ``UserNotFoundError`` if the user does not exist."""
        user = await self._users.set_is_active(user_id, is_active)
        logger.info("User %s is_active=%s", user_id, is_active)
        return user

    async def get_user_reviews(self, user_id: UserID) -> list[PullRequest]:
        """Return the pull requests ``user_id`` reviews.

        An unknown user raises ``UserNotFoundError`` rather than returning
        an empty list.
        """
        await self._users.get_by_id(user_id)
        return await self._pull_requests.get_by_reviewer(user_id)
