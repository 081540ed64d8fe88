"""Health check endpoints."""
from __future__ import annotations

from fastapi import APIRouter

from pr_reviewers.config import settings
from pr_reviewers.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(
        status="ok",
        service=settings.app_name,
        version=settings.app_version,
    )
