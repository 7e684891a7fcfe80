"""
Stage endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.database import get_db
from worksite.core.dependencies import OrgContext, PageParams, get_org_context, get_page_params
from worksite.models.stage import StageStatus
from worksite.schemas.stage import StageCreateRequest, StageUpdateRequest
from worksite.services.stage_service import StageService

router = APIRouter()


def get_stage_service(
    db: AsyncSession = Depends(get_db),
    ctx: OrgContext = Depends(get_org_context),
) -> StageService:
    return StageService(db=db, ctx=ctx)


@router.get("", summary="List stages")
async def list_stages(
    page: PageParams = Depends(get_page_params),
    search: str | None = Query(default=None, max_length=200),
    project_id: str | None = Query(default=None, alias="projectId"),
    stage_status: StageStatus | None = Query(default=None, alias="status"),
    service: StageService = Depends(get_stage_service),
) -> Response:
    return await service.list_stages(
        page, search=search, project_id=project_id, status=stage_status,
    )


@router.get("/project/{project_id}", summary="All stages of a project")
async def list_project_stages(
    project_id: str,
    service: StageService = Depends(get_stage_service),
) -> Response:
    return await service.list_project_stages(project_id)


@router.get("/{stage_id}", summary="Get a stage")
async def get_stage(stage_id: str, service: StageService = Depends(get_stage_service)) -> Response:
    return await service.get_stage(stage_id)


@router.get("/{stage_id}/stats", summary="Budget and task progress for a stage")
async def get_stage_stats(
    stage_id: str,
    service: StageService = Depends(get_stage_service),
) -> Response:
    return await service.get_stage_stats(stage_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a stage")
async def create_stage(
    body: StageCreateRequest,
    service: StageService = Depends(get_stage_service),
) -> Response:
    return await service.create_stage(body)


@router.put("/{stage_id}", summary="Update a stage")
async def update_stage(
    stage_id: str,
    body: StageUpdateRequest,
    service: StageService = Depends(get_stage_service),
) -> Response:
    return await service.update_stage(stage_id, body)


@router.delete("/{stage_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a stage")
async def delete_stage(stage_id: str, service: StageService = Depends(get_stage_service)) -> Response:
    return await service.delete_stage(stage_id)
