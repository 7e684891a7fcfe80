"""
Team member endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.database import get_db
from worksite.core.dependencies import OrgContext, PageParams, get_org_context, get_page_params
from worksite.schemas.team import TeamMemberCreateRequest, TeamMemberUpdateRequest
from worksite.services.team_service import TeamService

router = APIRouter()


def get_team_service(
    db: AsyncSession = Depends(get_db),
    ctx: OrgContext = Depends(get_org_context),
) -> TeamService:
    return TeamService(db=db, ctx=ctx)


@router.get("", summary="List team members")
async def list_members(
    page: PageParams = Depends(get_page_params),
    search: str | None = Query(default=None, max_length=200),
    role_id: str | None = Query(default=None, alias="roleId"),
    service: TeamService = Depends(get_team_service),
) -> Response:
    return await service.list_members(page, search=search, role_id=role_id)


@router.get("/{user_id}", summary="Get a team member")
async def get_member(user_id: str, service: TeamService = Depends(get_team_service)) -> Response:
    return await service.get_member(user_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Add a team member")
async def create_member(
    body: TeamMemberCreateRequest,
    service: TeamService = Depends(get_team_service),
) -> Response:
    return await service.create_member(body)


@router.put("/{user_id}", summary="Update a team member")
async def update_member(
    user_id: str,
    body: TeamMemberUpdateRequest,
    service: TeamService = Depends(get_team_service),
) -> Response:
    return await service.update_member(user_id, body)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove a team member")
async def delete_member(user_id: str, service: TeamService = Depends(get_team_service)) -> Response:
    return await service.delete_member(user_id)
