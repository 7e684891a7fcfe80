"""
Project endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.database import get_db
from worksite.core.dependencies import OrgContext, PageParams, get_org_context, get_page_params
from worksite.models.project import ProjectStatus
from worksite.schemas.project import ProjectCreateRequest, ProjectUpdateRequest
from worksite.services.project_service import ProjectService

router = APIRouter()


def get_project_service(
    db: AsyncSession = Depends(get_db),
    ctx: OrgContext = Depends(get_org_context),
) -> ProjectService:
    return ProjectService(db=db, ctx=ctx)


@router.get("", summary="List projects")
async def list_projects(
    page: PageParams = Depends(get_page_params),
    search: str | None = Query(default=None, max_length=200),
    project_status: ProjectStatus | None = Query(default=None, alias="status"),
    service: ProjectService = Depends(get_project_service),
) -> Response:
    return await service.list_projects(page, search=search, status=project_status)


@router.get("/{project_id}", summary="Get a project")
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> Response:
    return await service.get_project(project_id)


@router.get("/{project_id}/stats", summary="Expense and payment totals for a project")
async def get_project_stats(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> Response:
    return await service.get_project_stats(project_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a project")
async def create_project(
    body: ProjectCreateRequest,
    service: ProjectService = Depends(get_project_service),
) -> Response:
    return await service.create_project(body)


@router.put("/{project_id}", summary="Update a project")
async def update_project(
    project_id: str,
    body: ProjectUpdateRequest,
    service: ProjectService = Depends(get_project_service),
) -> Response:
    return await service.update_project(project_id, body)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a project")
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> Response:
    return await service.delete_project(project_id)
