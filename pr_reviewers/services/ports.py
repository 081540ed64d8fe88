"""Ports: the only collaborators the application services depend on.

Concrete adapters (``pr_reviewers.db.repositories`` for the store,
``pr_reviewers.db.transaction`` for the unit of work,
``pr_reviewers.services.providers`` for time and randomness) implement
these protocols.  Services import the protocols; they never import a
concrete adapter directly.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable, MutableSequence, Sequence
from datetime import datetime
from typing import Protocol, TypeVar, runtime_checkable

from pr_reviewers.domain.entities import PullRequest, Team, User
from pr_reviewers.domain.types import PullRequestID, TeamName, UserID

T = TypeVar("T")


@runtime_checkable
class UserRepository(Protocol):
    async def get_by_id(self, user_id: UserID) -> User:
        """Return the user. Raises ``UserNotFoundError`` if absent."""
        ...

    async def get_users_by_team(self, team_name: TeamName) -> list[User]:
        ...

    async def get_all(self) -> list[User]:
        ...

    async def upsert_members(self, team_name: TeamName, members: Sequence[User]) -> None:
        """Insert or update ``members`` under ``team_name``.

        Existing users are re-parented and get their username and active
        flag overwritten.
        """
        ...

    async def set_is_active(self, user_id: UserID, is_active: bool) -> User:
        """Atomically update the flag and return the stored user.

        Raises ``UserNotFoundError`` if absent.
        """
        ...


@runtime_checkable
class TeamRepository(Protocol):
    async def create(self, team: Team) -> None:
        """Raises ``TeamExistsError`` on a duplicate name."""
        ...

    async def get_by_name(self, team_name: TeamName) -> Team:
        """Raises ``TeamNotFoundError`` if absent."""
        ...

    async def get_all(self) -> list[Team]:
        ...


@runtime_checkable
class PullRequestRepository(Protocol):
    async def create(self, pull_request: PullRequest) -> None:
        """Persist the pull request and its reviewer slots.

        Raises ``PullRequestExistsError`` on a duplicate ID.
        """
        ...

    async def save(self, pull_request: PullRequest) -> None:
        """Persist status and merge timestamp.

        The write only applies while the stored row is still OPEN, so a
        concurrent second merge cannot overwrite the first timestamp.
        """
        ...

    async def get_by_id(self, pull_request_id: PullRequestID) -> PullRequest:
        """Raises ``PullRequestNotFoundError`` if absent."""
        ...

    async def get_by_reviewer(self, user_id: UserID) -> list[PullRequest]:
        ...

    async def get_all(self) -> list[PullRequest]:
        ...

    async def reassign_reviewer(
        self,
        pull_request_id: PullRequestID,
        old_reviewer_id: UserID,
        new_reviewer_id: UserID,
    ) -> None:
        """Swap ``old_reviewer_id`` for ``new_reviewer_id`` in place.

        Conditional on ``old_reviewer_id`` still holding the slot; raises
        ``ReviewerNotAssignedError`` when it no longer does.
        """
        ...


@runtime_checkable
class TransactionManager(Protocol):
    """Unit of work."""

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Await ``operation()`` inside one atomic transaction.

        Commits when it returns.  Any exception (including cancellation)
        rolls everything back and is re-raised unchanged.
        """
        ...


@runtime_checkable
class TimeProvider(Protocol):
    def now(self) -> datetime:
        """Return the current time, timezone-aware."""
        ...


@runtime_checkable
class RandomProvider(Protocol):
    def shuffle(self, items: MutableSequence[T]) -> None:
        """Permute ``items`` in place, uniformly at random."""
        ...

    def int_below(self, n: int) -> int:
        """Return a uniform integer in ``[0, n)``."""
        ...
