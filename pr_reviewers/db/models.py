"""SQLAlchemy ORM models for teams, users and pull requests.

Tables:
- teams: Named groups of users
- users: One row per user; ``team_name`` links to teams by convention only
- pull_requests: Pull requests and their lifecycle status
- pull_request_reviewers: Reviewer slots; ``position`` keeps slot order
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    PrimaryKeyConstraint,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from pr_reviewers.db.database import Base


class TeamModel(Base):
    __tablename__ = "teams"

    team_name: Mapped[str] = mapped_column(String(255), primary_key=True)


class UserModel(Base):
    """A user. Membership is ``team_name``; it is not a foreign key."""

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    team_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class PullRequestModel(Base):
    """A pull request.

    ``status`` progresses ``OPEN`` → ``MERGED``.  ``merged_at`` is populated
    only when status becomes ``MERGED``.
    """

    __tablename__ = "pull_requests"

    pull_request_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    pull_request_name: Mapped[str] = mapped_column(String(500), nullable=False)
    author_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.user_id"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="OPEN", index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    merged_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class PullRequestReviewerModel(Base):
    """One reviewer slot on a pull request.

    The primary key forbids the same reviewer twice on one pull request; the
    unique position keeps slots distinct so an in-place swap preserves order.
    """

    __tablename__ = "pull_request_reviewers"
    __table_args__ = (
        PrimaryKeyConstraint("pull_request_id", "user_id", name="pk_pull_request_reviewers"),
        UniqueConstraint("pull_request_id", "position", name="uq_pull_request_reviewers_position"),
    )

    pull_request_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("pull_requests.pull_request_id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.user_id"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
