"""Aggregate statistics endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from pr_reviewers.api.dependencies import get_stats_service
from pr_reviewers.models.responses import StatsResponse, to_stats_response
from pr_reviewers.services.stats import StatsService

router = APIRouter()


@router.get(
    "/stats",
    response_model=StatsResponse,
    operation_id="getStats",
    summary="PR, user and team statistics",
)
async def get_stats(service: StatsService = Depends(get_stats_service)) -> StatsResponse:
    return to_stats_response(await service.get_stats())
