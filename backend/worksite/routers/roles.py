"""
Role endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.database import get_db
from worksite.core.dependencies import OrgContext, PageParams, get_org_context, get_page_params
from worksite.schemas.role import RoleCreateRequest, RoleUpdateRequest
from worksite.services.role_service import RoleService

router = APIRouter()


def get_role_service(
    db: AsyncSession = Depends(get_db),
    ctx: OrgContext = Depends(get_org_context),
) -> RoleService:
    return RoleService(db=db, ctx=ctx)


@router.get("", summary="List roles")
async def list_roles(
    page: PageParams = Depends(get_page_params),
    search: str | None = Query(default=None, max_length=200),
    service: RoleService = Depends(get_role_service),
) -> Response:
    return await service.list_roles(page, search=search)


@router.get("/{role_id}", summary="Get a role")
async def get_role(role_id: str, service: RoleService = Depends(get_role_service)) -> Response:
    return await service.get_role(role_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a role")
async def create_role(
    body: RoleCreateRequest,
    service: RoleService = Depends(get_role_service),
) -> Response:
    return await service.create_role(body)


@router.put("/{role_id}", summary="Update a role")
async def update_role(
    role_id: str,
    body: RoleUpdateRequest,
    service: RoleService = Depends(get_role_service),
) -> Response:
    return await service.update_role(role_id, body)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a role")
async def delete_role(role_id: str, service: RoleService = Depends(get_role_service)) -> Response:
    return await service.delete_role(role_id)
