"""Identifier and value types shared across the service."""
from __future__ import annotations

from enum import Enum
from typing import NewType

UserID = NewType("UserID", str)
TeamName = NewType("TeamName", str)
PullRequestID = NewType("PullRequestID", str)

MAX_REVIEWERS = 2


class PullRequestStatus(str, Enum):
    """Lifecycle state of a pull request.

    OPEN is the initial state. MERGED is terminal.
    """
    OPEN = "OPEN"
    MERGED = "MERGED"
