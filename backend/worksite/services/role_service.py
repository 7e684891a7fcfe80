"""
Role business logic.
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
from worksite.models.role import Role
from worksite.repositories.role import RoleRepository
from worksite.schemas.role import RoleCreateRequest, RoleResponse, RoleUpdateRequest

handle = error_handler("role")


def _role_response(role: Role, member_count: int) -> RoleResponse:
    response = RoleResponse.model_validate(role)
    return response.model_copy(update={"member_count": member_count})


class RoleService:
    """Handles all role operations. Scoped to the caller's organization."""

    def __init__(self, db: AsyncSession, ctx: OrgContext) -> None:
        self.db = db
        self.roles = RoleRepository(db, ctx.organization_id)

    @handle("fetch")
    async def list_roles(self, page: PageParams, search: str | None = None) -> Response:
        roles, total = await self.roles.find_all(skip=page.skip, take=page.limit, search=search)
        counts = await self.roles.member_counts([r.id for r in roles])
        return send_paginated(
            [_role_response(r, counts[r.id]) for r in roles],
            build_pagination(page.page, page.limit, total),
        )

    @handle("fetch")
    async def get_role(self, role_id: str) -> Response:
        role = await self.roles.find_by_id(role_id)
        if role is None:
            return send_not_found("Role")
        return send_success(_role_response(role, await self.roles.member_count(role.id)))

    @handle("create")
    async def create_role(self, body: RoleCreateRequest) -> Response:
        role = await self.roles.create(body.model_dump())
        return send_created(_role_response(role, 0))

    @handle("update")
    async def update_role(self, role_id: str, body: RoleUpdateRequest) -> Response:
        role = await self.roles.update(role_id, body.model_dump(exclude_unset=True))
        return send_success(_role_response(role, await self.roles.member_count(role.id)))

    @handle("delete")
    async def delete_role(self, role_id: str) -> Response:
        await self.roles.delete(role_id)
        return send_no_content()
