"""
Domain entities: User, Team and PullRequest.

``PullRequest`` owns the reviewer assignment state machine::

    OPEN ──merge()──▶ MERGED

Its mutators only enforce capacity and exclusion rules.  Who is eligible
to review (same team, active) and how candidates are ranked is decided by
the service layer, which sees team membership; the entity does not.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from pr_reviewers.domain.errors import (
    NoCandidateError,
    PullRequestMergedError,
    ReviewerNotAssignedError,
)
from pr_reviewers.domain.types import (
    MAX_REVIEWERS,
    PullRequestID,
    PullRequestStatus,
    TeamName,
    UserID,
)


@dataclass(frozen=True)
class User:
    user_id: UserID
    username: str
    team_name: TeamName
    is_active: bool


@dataclass(frozen=True)
class Team:
    name: TeamName


class PullRequest:
    """A pull request with at most ``MAX_REVIEWERS`` assigned reviewers.

    Invariants held by every instance:

    - ``len(reviewers) <= MAX_REVIEWERS``
    - the author is never a reviewer
    - reviewer IDs are unique
    - ``merged_at`` is set iff ``status`` is MERGED
    - once MERGED, reviewers and ``merged_at`` never change

    ``status`` and ``merged_at`` are read-only; ``merge()`` is the only
    writer.  The constructor accepts a status, reviewers and merge time so
    a stored pull request can be rehydrated, and validates them.
    """

    def __init__(
        self,
        pull_request_id: PullRequestID,
        name: str,
        author_id: UserID,
        created_at: datetime,
        *,
        reviewers: Iterable[UserID] = (),
        status: PullRequestStatus = PullRequestStatus.OPEN,
        merged_at: datetime | None = None,
    ) -> None:
        self.pull_request_id = pull_request_id
        self.name = name
        self.author_id = author_id
        self.created_at = created_at
        self._status = PullRequestStatus(status)
        self._merged_at = merged_at
        self._reviewers: list[UserID] = list(reviewers)
        self._validate()

    def _validate(self) -> None:
        if len(self._reviewers) > MAX_REVIEWERS:
            raise ValueError(
                f"pull request {self.pull_request_id!r} has "
                f"{len(self._reviewers)} reviewers (max {MAX_REVIEWERS})"
            )
        if self.author_id in self._reviewers:
            raise ValueError(f"author {self.author_id!r} cannot review their own pull request")
        if len(set(self._reviewers)) != len(self._reviewers):
            raise ValueError(f"duplicate reviewers on pull request {self.pull_request_id!r}")
        if (self._status is PullRequestStatus.MERGED) != (self._merged_at is not None):
            raise ValueError("merged_at must be set exactly when status is MERGED")

    # -- queries -------------------------------------------------------------

    @property
    def status(self) -> PullRequestStatus:
        return self._status

    @property
    def merged_at(self) -> datetime | None:
        return self._merged_at

    @property
    def reviewers(self) -> list[UserID]:
        """Assigned reviewers in slot order (a fresh copy on every access)."""
        return list(self._reviewers)

    @property
    def is_merged(self) -> bool:
        return self._status is PullRequestStatus.MERGED

    @property
    def is_fully_assigned(self) -> bool:
        return len(self._reviewers) >= MAX_REVIEWERS

    def is_reviewer(self, user_id: UserID) -> bool:
        return user_id in self._reviewers

    # -- mutators ------------------------------------------------------------

    def add_reviewers(self, candidates: Iterable[UserID]) -> list[UserID]:
        """Fill free reviewer slots from ``candidates`` in order.

        Candidates equal to the author or already assigned are skipped.
        Stops once capacity is reached.  Does nothing on a merged or full
        pull request.

        Returns:
            The IDs actually added, in the order they were added.
        """
        if self.is_merged or self.is_fully_assigned:
            return []

        added: list[UserID] = []
        for candidate in candidates:
            if len(self._reviewers) >= MAX_REVIEWERS:
                break
            if candidate == self.author_id or candidate in self._reviewers:
                continue
            self._reviewers.append(candidate)
            added.append(candidate)
        return added

    def reassign_reviewer(self, old_reviewer_id: UserID, new_reviewer_id: UserID) -> None:
        """Replace ``old_reviewer_id`` with ``new_reviewer_id`` in the same slot.

        Raises:
            PullRequestMergedError: The pull request is merged.
            ReviewerNotAssignedError: ``old_reviewer_id`` holds no slot.
            NoCandidateError: ``new_reviewer_id`` is the author or already
                assigned (including ``old_reviewer_id`` itself).
        """
        if self.is_merged:
            raise PullRequestMergedError(self.pull_request_id)
        if old_reviewer_id not in self._reviewers:
            raise ReviewerNotAssignedError(self.pull_request_id, old_reviewer_id)
        if new_reviewer_id == self.author_id or new_reviewer_id in self._reviewers:
            raise NoCandidateError(self.pull_request_id)

        self._reviewers[self._reviewers.index(old_reviewer_id)] = new_reviewer_id

    def merge(self, merged_at: datetime) -> None:
        """Mark the pull request MERGED. Later calls keep the first timestamp."""
        if self.is_merged:
            return
        self._status = PullRequestStatus.MERGED
        self._merged_at = merged_at

    def __repr__(self) -> str:
        return (
            f"PullRequest(pull_request_id={self.pull_request_id!r}, "
            f"status={self._status.value}, reviewers={self._reviewers!r})"
        )
