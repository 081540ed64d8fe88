"""
Domain error taxonomy.

Every failure raised by the entities, services and repositories is a
``PRServiceError`` subclass.  Each carries:

- ``code``: stable machine-readable identifier surfaced over HTTP
- ``kind``: the ``ErrorKind`` the HTTP layer maps to a status code
- a default human-readable message

Infrastructure errors that are not one of these are never wrapped here;
they propagate unchanged and are treated as ``ErrorKind.UNEXPECTED`` at
the boundary.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of a domain error."""
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_STATE = "invalid_state"
    POLICY_VIOLATION = "policy_violation"
    TRANSACTION_UNAVAILABLE = "transaction_unavailable"
    UNEXPECTED = "unexpected"


class PRServiceError(Exception):
    """Base class for all domain errors."""

    code: str = "INTERNAL_ERROR"
    kind: ErrorKind = ErrorKind.UNEXPECTED
    default_message: str = "internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------


class NotFoundError(PRServiceError):
    """A requested user, team or pull request does not exist."""

    code = "NOT_FOUND"
    kind = ErrorKind.NOT_FOUND
    default_message = "resource not found"


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"user {user_id!r} not found")


class TeamNotFoundError(NotFoundError):
    def __init__(self, team_name: str) -> None:
        self.team_name = team_name
        super().__init__(f"team {team_name!r} not found")


class PullRequestNotFoundError(NotFoundError):
    def __init__(self, pull_request_id: str) -> None:
        self.pull_request_id = pull_request_id
        super().__init__(f"pull request {pull_request_id!r} not found")


# ---------------------------------------------------------------------------
# Conflict
# ---------------------------------------------------------------------------


class TeamExistsError(PRServiceError):
    """A team with the same name already exists."""

    code = "TEAM_EXISTS"
    kind = ErrorKind.CONFLICT
    default_message = "team_name already exists"

    def __init__(self, team_name: str) -> None:
        self.team_name = team_name
        super().__init__()


class PullRequestExistsError(PRServiceError):
    """A pull request with the same ID already exists."""

    code = "PR_EXISTS"
    kind = ErrorKind.CONFLICT
    default_message = "PR id already exists"

    def __init__(self, pull_request_id: str) -> None:
        self.pull_request_id = pull_request_id
        super().__init__()


# ---------------------------------------------------------------------------
# Invalid state / policy
# ---------------------------------------------------------------------------


class PullRequestMergedError(PRServiceError):
    """The operation is not allowed on a merged pull request."""

    code = "PR_MERGED"
    kind = ErrorKind.INVALID_STATE
    default_message = "cannot reassign on merged PR"

    def __init__(self, pull_request_id: str) -> None:
        self.pull_request_id = pull_request_id
        super().__init__()


class ReviewerNotAssignedError(PRServiceError):
    code = "NOT_ASSIGNED"
    kind = ErrorKind.POLICY_VIOLATION
    default_message = "reviewer is not assigned to this PR"

    def __init__(self, pull_request_id: str, user_id: str) -> None:
        self.pull_request_id = pull_request_id
        self.user_id = user_id
        super().__init__()


class NoCandidateError(PRServiceError):
    """No active teammate is eligible to take the reviewer slot."""

    code = "NO_CANDIDATE"
    kind = ErrorKind.POLICY_VIOLATION
    default_message = "no active replacement candidate in team"

    def __init__(self, pull_request_id: str) -> None:
        self.pull_request_id = pull_request_id
        super().__init__()


class AuthorNotActiveError(PRServiceError):
    code = "AUTHOR_NOT_ACTIVE"
    kind = ErrorKind.POLICY_VIOLATION
    default_message = "user can not create PR with false active status"

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__()


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


class TransactionRequiredError(PRServiceError):
    """A transactional operation was called without a transaction manager.

    This is a wiring bug, never a user error.
    """

    code = "INTERNAL_ERROR"
    kind = ErrorKind.TRANSACTION_UNAVAILABLE
    default_message = "transaction manager is not configured"
