"""
Stage business logic.
"""

from __future__ import annotations

from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.dependencies import OrgContext, PageParams
from worksite.core.error_handler import error_handler
from worksite.core.errors import ValidationFailedError
from worksite.core.responses import (
    build_pagination,
    send_created,
    send_no_content,
    send_not_found,
    send_paginated,
    send_success,
)
from worksite.models.project import Project
from worksite.models.stage import StageStatus
from worksite.repositories.base import ensure_in_organization, with_decimals
from worksite.repositories.stage import StageRepository
from worksite.schemas.stage import (
    StageCreateRequest,
    StageResponse,
    StageStatsResponse,
    StageUpdateRequest,
)

handle = error_handler("stage")

_NUMERIC = ("budget_amount", "weight")


class StageService:
    def __init__(self, db: AsyncSession, ctx: OrgContext) -> None:
        self.db = db
        self.organization_id = ctx.organization_id
        self.stages = StageRepository(db, ctx.organization_id)

    @handle("fetch")
    async def list_stages(
        self,
        page: PageParams,
        search: str | None = None,
        project_id: str | None = None,
        status: StageStatus | None = None,
    ) -> Response:
        stages, total = await self.stages.find_all(
            skip=page.skip, take=page.limit, search=search, project_id=project_id, status=status
        )
        return send_paginated(
            [StageResponse.model_validate(s) for s in stages],
            build_pagination(page.page, page.limit, total),
        )

    @handle("fetch")
    async def list_project_stages(self, project_id: str) -> Response:
        await ensure_in_organization(self.db, Project, project_id, self.organization_id, "Project")
        stages = await self.stages.find_by_project(project_id)
        return send_success([StageResponse.model_validate(s) for s in stages])

    @handle("fetch")
    async def get_stage(self, stage_id: str) -> Response:
        stage = await self.stages.find_by_id(stage_id)
        if stage is None:
            return send_not_found("Stage")
        return send_success(StageResponse.model_validate(stage))

    @handle("fetch")
    async def get_stage_stats(self, stage_id: str) -> Response:
        stage = await self.stages.find_by_id(stage_id)
        if stage is None:
            return send_not_found("Stage")
        stats = await self.stages.get_stage_stats(stage)
        return send_success(StageStatsResponse.model_validate(stats))

    @handle("create")
    async def create_stage(self, body: StageCreateRequest) -> Response:
        await ensure_in_organization(
            self.db, Project, body.project_id, self.organization_id, "Project"
        )
        stage = await self.stages.create(with_decimals(body.model_dump(), *_NUMERIC))
        return send_created(StageResponse.model_validate(stage))

    @handle("update")
    async def update_stage(self, stage_id: str, body: StageUpdateRequest) -> Response:
        data = body.model_dump(exclude_unset=True)
        if "start_date" in data or "end_date" in data:
            stage = await self.stages.find_by_id(stage_id)
            if stage is None:
                return send_not_found("Stage")
            start_date = data.get("start_date") or stage.start_date
            end_date = data.get("end_date") or stage.end_date
            if end_date < start_date:
                raise ValidationFailedError("endDate must not be before startDate")
        stage = await self.stages.update(stage_id, with_decimals(data, *_NUMERIC))
        return send_success(StageResponse.model_validate(stage))

    @handle("delete")
    async def delete_stage(self, stage_id: str) -> Response:
        await self.stages.delete(stage_id)
        return send_no_content()
