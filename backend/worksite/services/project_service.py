"""
Project business logic.
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
from worksite.models.project import ProjectStatus
from worksite.repositories.base import with_decimals
from worksite.repositories.project import ProjectRepository
from worksite.schemas.project import (
    ProjectCreateRequest,
    ProjectResponse,
    ProjectStatsResponse,
    ProjectUpdateRequest,
)

handle = error_handler("project")


class ProjectService:
    def __init__(self, db: AsyncSession, ctx: OrgContext) -> None:
        self.db = db
        self.projects = ProjectRepository(db, ctx.organization_id)

    @handle("fetch")
    async def list_projects(
        self,
        page: PageParams,
        search: str | None = None,
        status: ProjectStatus | None = None,
    ) -> Response:
        projects, total = await self.projects.find_all(
            skip=page.skip, take=page.limit, search=search, status=status
        )
        return send_paginated(
            [ProjectResponse.model_validate(p) for p in projects],
            build_pagination(page.page, page.limit, total),
        )

    @handle("fetch")
    async def get_project(self, project_id: str) -> Response:
        project = await self.projects.find_by_id(project_id)
        if project is None:
            return send_not_found("Project")
        return send_success(ProjectResponse.model_validate(project))

    @handle("fetch")
    async def get_project_stats(self, project_id: str) -> Response:
        if await self.projects.find_by_id(project_id) is None:
            return send_not_found("Project")
        stats = await self.projects.get_project_stats(project_id)
        return send_success(ProjectStatsResponse.model_validate(stats))

    @handle("create")
    async def create_project(self, body: ProjectCreateRequest) -> Response:
        project = await self.projects.create(with_decimals(body.model_dump(), "amount"))
        return send_created(ProjectResponse.model_validate(project))

    @handle("update")
    async def update_project(self, project_id: str, body: ProjectUpdateRequest) -> Response:
        project = await self.projects.update(
            project_id, with_decimals(body.model_dump(exclude_unset=True), "amount")
        )
        return send_success(ProjectResponse.model_validate(project))

    @handle("delete")
    async def delete_project(self, project_id: str) -> Response:
        await self.projects.delete(project_id)
        return send_no_content()
