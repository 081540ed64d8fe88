"""API route modules."""
from __future__ import annotations

from pr_reviewers.api.routes import health, pull_requests, stats, teams, users

__all__ = ["health", "pull_requests", "stats", "teams", "users"]
