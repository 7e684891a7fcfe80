"""
Team business logic.
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
from worksite.repositories.team import TeamRepository
from worksite.schemas.team import (
    TeamMemberCreateRequest,
    TeamMemberResponse,
    TeamMemberUpdateRequest,
)

handle = error_handler("team member")


class TeamService:
    """Handles team members of the caller's organization."""

    def __init__(self, db: AsyncSession, ctx: OrgContext) -> None:
        self.db = db
        self.team = TeamRepository(db, ctx.organization_id)

    @handle("fetch")
    async def list_members(
        self,
        page: PageParams,
        search: str | None = None,
        role_id: str | None = None,
    ) -> Response:
        members, total = await self.team.find_all(
            skip=page.skip, take=page.limit, search=search, role_id=role_id
        )
        return send_paginated(
            [TeamMemberResponse.model_validate(m) for m in members],
            build_pagination(page.page, page.limit, total),
        )

    @handle("fetch")
    async def get_member(self, user_id: str) -> Response:
        member = await self.team.find_by_id(user_id)
        if member is None:
            return send_not_found("Team member")
        return send_success(TeamMemberResponse.model_validate(member))

    @handle("create")
    async def create_member(self, body: TeamMemberCreateRequest) -> Response:
        member = await self.team.create(body.model_dump())
        return send_created(TeamMemberResponse.model_validate(member))

    @handle("update")
    async def update_member(self, user_id: str, body: TeamMemberUpdateRequest) -> Response:
        member = await self.team.update(user_id, body.model_dump(exclude_unset=True))
        return send_success(TeamMemberResponse.model_validate(member))

    @handle("delete")
    async def delete_member(self, user_id: str) -> Response:
        await self.team.delete(user_id)
        return send_no_content()
