"""Initial schema: teams, users, pull requests and reviewer slots.

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

Creates:
  - teams
  - users (team_name indexed; not a foreign key, membership is by convention)
  - pull_requests (status OPEN | MERGED; merged_at set only once merged)
  - pull_request_reviewers (one row per slot; position preserves slot order)

Fresh install:
  alembic upgrade head
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("team_name", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("team_name"),
    )

    op.create_table(
        "users",
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("team_name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index("ix_users_team_name", "users", ["team_name"])

    op.create_table(
        "pull_requests",
        sa.Column("pull_request_id", sa.String(255), nullable=False),
        sa.Column("pull_request_name", sa.String(500), nullable=False),
        sa.Column("author_id", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="OPEN"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("merged_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["author_id"], ["users.user_id"]),
        sa.PrimaryKeyConstraint("pull_request_id"),
    )
    op.create_index("ix_pull_requests_author_id", "pull_requests", ["author_id"])
    op.create_index("ix_pull_requests_status", "pull_requests", ["status"])

    op.create_table(
        "pull_request_reviewers",
        sa.Column("pull_request_id", sa.String(255), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["pull_request_id"], ["pull_requests.pull_request_id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"]),
        sa.PrimaryKeyConstraint("pull_request_id", "user_id", name="pk_pull_request_reviewers"),
        sa.UniqueConstraint(
            "pull_request_id", "position", name="uq_pull_request_reviewers_position"
        ),
    )
    op.create_index("ix_pull_request_reviewers_user_id", "pull_request_reviewers", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_pull_request_reviewers_user_id", table_name="pull_request_reviewers")
    op.drop_table("pull_request_reviewers")
    op.drop_index("ix_pull_requests_status", table_name="pull_requests")
    op.drop_index("ix_pull_requests_author_id", table_name="pull_requests")
    op.drop_table("pull_requests")
    op.drop_index("ix_users_team_name", table_name="users")
    op.drop_table("users")
    op.drop_table("teams")
