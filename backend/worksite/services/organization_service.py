"""
Organization business logic.
"""

from __future__ import annotations

from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.dependencies import PageParams
from worksite.core.error_handler import error_handler
from worksite.core.errors import ForbiddenError
from worksite.core.responses import (
    build_pagination,
    send_created,
    send_no_content,
    send_not_found,
    send_paginated,
    send_success,
)
from worksite.models.organization import Organization
from worksite.repositories.organization import OrganizationRepository
from worksite.repositories.team import TeamRepository
from worksite.schemas.organization import (
    OrganizationCreateRequest,
    OrganizationResponse,
    OrganizationUpdateRequest,
)
from worksite.schemas.team import TeamMemberResponse

handle = error_handler("organization")


class OrganizationService:
    """Handles organization CRUD and the member listing."""

    def __init__(self, db: AsyncSession, user_id: str) -> None:
        self.db = db
        self.user_id = user_id
        self.organizations = OrganizationRepository(db)

    async def _response(self, organization: Organization) -> OrganizationResponse:
        counts = await self.organizations.counts(organization.id)
        return OrganizationResponse(
            id=organization.id,
            name=organization.name,
            created_at=organization.created_at,
            **counts,
        )

    async def _require_member(self, organization_id: str) -> None:
        if not await self.organizations.is_member(organization_id, self.user_id):
            raise ForbiddenError("You are not a member of this organization", code="NOT_A_MEMBER")

    @handle("create")
    async def create_organization(self, body: OrganizationCreateRequest) -> Response:
        organization = await self.organizations.create(body.model_dump(), creator_id=self.user_id)
        return send_created(await self._response(organization))

    @handle("fetch")
    async def get_organization(self, organization_id: str) -> Response:
        organization = await self.organizations.find_by_id(organization_id)
        if organization is None:
            return send_not_found("Organization")
        await self._require_member(organization_id)
        return send_success(await self._response(organization))

    @handle("update")
    async def update_organization(
        self, organization_id: str, body: OrganizationUpdateRequest,
    ) -> Response:
        if await self.organizations.find_by_id(organization_id) is None:
            return send_not_found("Organization")
        await self._require_member(organization_id)
        organization = await self.organizations.update(
            organization_id, body.model_dump(exclude_unset=True)
        )
        return send_success(await self._response(organization))

    @handle("delete")
    async def delete_organization(self, organization_id: str) -> Response:
        if await self.organizations.find_by_id(organization_id) is None:
            return send_not_found("Organization")
        await self._require_member(organization_id)
        await self.organizations.delete(organization_id)
        return send_no_content()

    @handle("fetch")
    async def list_members(
        self, organization_id: str, page: PageParams, search: str | None = None,
    ) -> Response:
        if await self.organizations.find_by_id(organization_id) is None:
            return send_not_found("Organization")
        await self._require_member(organization_id)
        members, total = await TeamRepository(self.db, organization_id).find_all(
            skip=page.skip, take=page.limit, search=search
        )
        return send_paginated(
            [TeamMemberResponse.model_validate(m) for m in members],
            build_pagination(page.page, page.limit, total),
        )
