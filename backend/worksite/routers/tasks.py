"""
Task endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.database import get_db
from worksite.core.dependencies import OrgContext, PageParams, get_org_context, get_page_params
from worksite.models.task import TaskStatus
from worksite.schemas.task import TaskCreateRequest, TaskStatusUpdateRequest, TaskUpdateRequest
from worksite.services.task_service import TaskService

router = APIRouter()


def get_task_service(
    db: AsyncSession = Depends(get_db),
    ctx: OrgContext = Depends(get_org_context),
) -> TaskService:
    return TaskService(db=db, ctx=ctx)


@router.get("", summary="List tasks")
async def list_tasks(
    page: PageParams = Depends(get_page_params),
    search: str | None = Query(default=None, max_length=200),
    stage_id: str | None = Query(default=None, alias="stageId"),
    project_id: str | None = Query(default=None, alias="projectId"),
    task_status: TaskStatus | None = Query(default=None, alias="status"),
    service: TaskService = Depends(get_task_service),
) -> Response:
    return await service.list_tasks(
        page,
        search=search,
        stage_id=stage_id,
        project_id=project_id,
        status=task_status,
    )


@router.get("/stage/{stage_id}", summary="All tasks of a stage")
async def list_stage_tasks(stage_id: str, service: TaskService = Depends(get_task_service)) -> Response:
    return await service.list_stage_tasks(stage_id)


@router.get("/project/{project_id}", summary="All tasks of a project")
async def list_project_tasks(
    project_id: str,
    service: TaskService = Depends(get_task_service),
) -> Response:
    return await service.list_project_tasks(project_id)


@router.get("/{task_id}", summary="Get a task")
async def get_task(task_id: str, service: TaskService = Depends(get_task_service)) -> Response:
    return await service.get_task(task_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a task")
async def create_task(
    body: TaskCreateRequest,
    service: TaskService = Depends(get_task_service),
) -> Response:
    return await service.create_task(body)


@router.put("/{task_id}", summary="Update a task")
async def update_task(
    task_id: str,
    body: TaskUpdateRequest,
    service: TaskService = Depends(get_task_service),
) -> Response:
    return await service.update_task(task_id, body)


@router.put("/{task_id}/status", summary="Change a task's status")
async def update_task_status(
    task_id: str,
    body: TaskStatusUpdateRequest,
    service: TaskService = Depends(get_task_service),
) -> Response:
    return await service.update_task_status(task_id, body)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a task")
async def delete_task(task_id: str, service: TaskService = Depends(get_task_service)) -> Response:
    return await service.delete_task(task_id)
