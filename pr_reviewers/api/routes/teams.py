"""Team route handlers.

Endpoint summary:
  POST /team/add  : create a team and upsert its members
  GET  /team/get  : fetch a team with its members

No business logic lives here; everything is delegated to TeamService.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status

from pr_reviewers.api.dependencies import get_team_service
from pr_reviewers.api.errors import DUPLICATE_USER_IDS, MISSING_TEAM_NAME, APIError
from pr_reviewers.domain.entities import User
from pr_reviewers.domain.types import TeamName, UserID
from pr_reviewers.models.requests import TeamCreate
from pr_reviewers.models.responses import TeamResponse, to_team_response
from pr_reviewers.services.teams import TeamService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/team/add",
    response_model=TeamResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createTeam",
    summary="Create a team with its members",
)
async def create_team(
    body: TeamCreate,
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    """Create a team.

    Members that already belong to another team are moved into this one.
    Returns 400 if the same user_id appears twice, 409 TEAM_EXISTS if the
    name is taken.
    """
    user_ids = [member.user_id for member in body.members]
    if len(set(user_ids)) != len(user_ids):
        raise APIError(status.HTTP_400_BAD_REQUEST, DUPLICATE_USER_IDS)

    team_name = TeamName(body.team_name)
    members = [
        User(
            user_id=UserID(member.user_id),
            username=member.username,
            team_name=team_name,
            is_active=member.is_active,
        )
        for member in body.members
    ]
    team, stored = await service.create(team_name, members)
    return to_team_response(team, stored)


@router.get(
    "/team/get",
    response_model=TeamResponse,
    operation_id="getTeam",
    summary="Get a team with its members",
)
async def get_team(
    team_name: str | None = Query(None, description="Team name"),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    if not team_name:
        raise APIError(status.HTTP_400_BAD_REQUEST, MISSING_TEAM_NAME)
    team, members = await service.get_by_name(TeamName(team_name))
    return to_team_response(team, members)
