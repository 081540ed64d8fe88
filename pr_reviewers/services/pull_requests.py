"""Pull request orchestration: create, merge and reviewer reassignment.

Boundary rules:
- Depends only on the ports in ``pr_reviewers.services.ports``.
- Must NOT import SQLAlchemy, FastAPI or any concrete adapter.

Reviewer selection
------------------
On create, every active teammate of the author (author excluded) is a
candidate.  The candidate list is shuffled by the injected
``RandomProvider`` and handed to ``PullRequest.add_reviewers``, which
keeps the first ``MAX_REVIEWERS`` eligible IDs.  An empty pool is fine:
the pull request starts with no reviewers.

On reassign, the pool is active teammates that are neither the author,
the reviewer being replaced, nor an already assigned reviewer.  A single
``int_below`` draw picks the replacement; an empty pool raises
``NoCandidateError``.

Create and reassign run inside one unit of work.  Merge is a single
conditional write handled by the repository.
"""
from __future__ import annotations

import logging

from pr_reviewers.domain.entities import PullRequest
from pr_reviewers.domain.errors import (
    AuthorNotActiveError,
    NoCandidateError,
    PullRequestExistsError,
    PullRequestMergedError,
    PullRequestNotFoundError,
    ReviewerNotAssignedError,
    TransactionRequiredError,
)
from pr_reviewers.domain.types import PullRequestID, PullRequestStatus, UserID
from pr_reviewers.services.ports import (
    PullRequestRepository,
    RandomProvider,
    TeamRepository,
    TimeProvider,
    TransactionManager,
    UserRepository,
)

logger = logging.getLogger(__name__)


class PullRequestService:
    def __init__(
        self,
        users: UserRepository,
        teams: TeamRepository,
        pull_requests: PullRequestRepository,
        transactions: TransactionManager | None,
        clock: TimeProvider,
        rng: RandomProvider,
    ) -> None:
        self._users = users
        self._teams = teams
        self._pull_requests = pull_requests
        self._transactions = transactions
        self._clock = clock
        self._rng = rng

    def _require_transactions(self) -> TransactionManager:
        if self._transactions is None:
            raise TransactionRequiredError()
        return self._transactions

    async def create(
        self,
        pull_request_id: PullRequestID,
        name: str,
        author_id: UserID,
    ) -> PullRequest:
        """Create an OPEN pull request and assign up to two random reviewers.

        Args:
            pull_request_id: ID for the new pull request.
            name: Human-readable title.
            author_id: The authoring user.

        Returns:
            The persisted pull request.

        Raises:
            PullRequestExistsError: ``pull_request_id`` is taken.
            UserNotFoundError: The author does not exist.
            TeamNotFoundError: The author's team does not exist.
            AuthorNotActiveError: The author is inactive.
        """
        transactions = self._require_transactions()

        async def _create() -> PullRequest:
            await self._ensure_absent(pull_request_id)

            author = await self._users.get_by_id(author_id)
            await self._teams.get_by_name(author.team_name)
            if not author.is_active:
                raise AuthorNotActiveError(author_id)

            members = await self._users.get_users_by_team(author.team_name)
            pull_request = PullRequest(
                pull_request_id=pull_request_id,
                name=name,
                author_id=author_id,
                created_at=self._clock.now(),
                status=PullRequestStatus.OPEN,
            )

            candidates = [
                member.user_id
                for member in members
                if member.is_active and member.user_id != author_id
            ]
            if candidates:
                self._rng.shuffle(candidates)
                pull_request.add_reviewers(candidates)

            await self._pull_requests.create(pull_request)
            return pull_request

        pull_request = await transactions.run(_create)
        logger.info(
            "✅ Created PR %s by %s with reviewers %s",
            pull_request_id,
            author_id,
            pull_request.reviewers,
        )
        return pull_request

    async def _ensure_absent(self, pull_request_id: PullRequestID) -> None:
        try:
            await self._pull_requests.get_by_id(pull_request_id)
        except PullRequestNotFoundError:
            return
        raise PullRequestExistsError(pull_request_id)

    async def merge(self, pull_request_id: PullRequestID) -> PullRequest:
        """Merge a pull request. Merging a merged pull request is a no-op.

        The returned pull request is re-read after the write, so a caller
        that loses a concurrent merge race still sees the winner's
        ``merged_at``.

        Raises:
            PullRequestNotFoundError: No such pull request.
        """
        pull_request = await self._pull_requests.get_by_id(pull_request_id)
        if pull_request.is_merged:
            return pull_request

        pull_request.merge(self._clock.now())
        await self._pull_requests.save(pull_request)

        stored = await self._pull_requests.get_by_id(pull_request_id)
        logger.info("✅ Merged PR %s at %s", pull_request_id, stored.merged_at)
        return stored

    async def reassign_reviewer(
        self,
        pull_request_id: PullRequestID,
        old_reviewer_id: UserID,
    ) -> tuple[PullRequest, UserID]:
        """Replace one reviewer with a random eligible teammate of the author.

        Returns:
            ``(pull_request, new_reviewer_id)`` where ``pull_request`` is the
            stored state after the swap.

        Raises:
            PullRequestNotFoundError: No such pull request.
            PullRequestMergedError: The pull request is merged.
            UserNotFoundError: ``old_reviewer_id`` is not a known user.
            ReviewerNotAssignedError: ``old_reviewer_id`` is not a reviewer.
            NoCandidateError: No eligible replacement exists.
        """
        transactions = self._require_transactions()

        async def _reassign() -> tuple[PullRequest, UserID]:
            pull_request = await self._pull_requests.get_by_id(pull_request_id)
            if pull_request.is_merged:
                raise PullRequestMergedError(pull_request_id)

            await self._users.get_by_id(old_reviewer_id)
            if not pull_request.is_reviewer(old_reviewer_id):
                raise ReviewerNotAssignedError(pull_request_id, old_reviewer_id)

            author = await self._users.get_by_id(pull_request.author_id)
            await self._teams.get_by_name(author.team_name)
            members = await self._users.get_users_by_team(author.team_name)

            pool = [
                member.user_id
                for member in members
                if member.is_active
                and member.user_id != pull_request.author_id
                and member.user_id != old_reviewer_id
                and not pull_request.is_reviewer(member.user_id)
            ]
            if not pool:
                raise NoCandidateError(pull_request_id)

            new_reviewer_id = pool[self._rng.int_below(len(pool))]
            pull_request.reassign_reviewer(old_reviewer_id, new_reviewer_id)
            await self._pull_requests.reassign_reviewer(
                pull_request_id, old_reviewer_id, new_reviewer_id
            )

            return await self._pull_requests.get_by_id(pull_request_id), new_reviewer_id

        pull_request, new_reviewer_id = await transactions.run(_reassign)
        logger.info(
            "✅ Reassigned PR %s reviewer %s → %s",
            pull_request_id,
            old_reviewer_id,
            new_reviewer_id,
        )
        return pull_request, new_reviewer_id
