"""
Task business logic.

Any task mutation changes the aggregates of the stage(s) it touches; clients
re-read stage stats after create/update/delete (see worksite.client.invalidation).
"""

from __future__ import annotations

from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.dependencies import OrgContext, PageParams
from worksite.core.error_handler import error_handler
from worksite.core.responses import (
    build_pagination,
    send_created,
    send_no_content,
    send_not_found,
    send_paginated,
    send_success,
)
from worksite.models.project import Project
from worksite.models.stage import Stage
from worksite.models.task import TaskStatus
from worksite.repositories.base import ensure_in_organization
from worksite.repositories.task import TaskRepository
from worksite.schemas.task import (
    TaskCreateRequest,
    TaskResponse,
    TaskStatusUpdateRequest,
    TaskUpdateRequest,
)

handle = error_handler("task")


class TaskService:
    """Handles all task operations."""

    def __init__(self, db: AsyncSession, ctx: OrgContext) -> None:
        self.db = db
        self.organization_id = ctx.organization_id
        self.tasks = TaskRepository(db, ctx.organization_id)

    @handle("fetch")
    async def list_tasks(
        self,
        page: PageParams,
        search: str | None = None,
        stage_id: str | None = None,
        project_id: str | None = None,
        status: TaskStatus | None = None,
    ) -> Response:
        tasks, total = await self.tasks.find_all(
            skip=page.skip,
            take=page.limit,
            search=search,
            stage_id=stage_id,
            project_id=project_id,
            status=status,
        )
        return send_paginated(
            [TaskResponse.model_validate(t) for t in tasks],
            build_pagination(page.page, page.limit, total),
        )

    @handle("fetch")
    async def list_stage_tasks(self, stage_id: str) -> Response:
        await ensure_in_organization(self.db, Stage, stage_id, self.organization_id, "Stage")
        tasks = await self.tasks.find_by_stage(stage_id)
        return send_success([TaskResponse.model_validate(t) for t in tasks])

    @handle("fetch")
    async def list_project_tasks(self, project_id: str) -> Response:
        await ensure_in_organization(self.db, Project, project_id, self.organization_id, "Project")
        tasks = await self.tasks.find_by_project(project_id)
        return send_success([TaskResponse.model_validate(t) for t in tasks])

    @handle("fetch")
    async def get_task(self, task_id: str) -> Response:
        task = await self.tasks.find_by_id(task_id)
        if task is None:
            return send_not_found("Task")
        return send_success(TaskResponse.model_validate(task))

    @handle("create")
    async def create_task(self, body: TaskCreateRequest) -> Response:
        task = await self.tasks.create(body.model_dump())
        return send_created(TaskResponse.model_validate(task))

    @handle("update")
    async def update_task(self, task_id: str, body: TaskUpdateRequest) -> Response:
        task = await self.tasks.update(task_id, body.model_dump(exclude_unset=True))
        return send_success(TaskResponse.model_validate(task))

    @handle("update")
    async def update_task_status(self, task_id: str, body: TaskStatusUpdateRequest) -> Response:
        task = await self.tasks.update_status(task_id, body.status)
        return send_success(TaskResponse.model_validate(task))

    @handle("delete")
    async def delete_task(self, task_id: str) -> Response:
        await self.tasks.delete(task_id)
        return send_no_content()
