"""
Organization endpoints.

Not organization-scoped; the caller is identified by X-User-Id.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.database import get_db
from worksite.core.dependencies import PageParams, get_page_params, get_user_id
from worksite.schemas.organization import OrganizationCreateRequest, OrganizationUpdateRequest
from worksite.services.organization_service import OrganizationService

router = APIRouter()


def get_organization_service(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_user_id),
) -> OrganizationService:
    return OrganizationService(db=db, user_id=user_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create an organization")
async def create_organization(
    body: OrganizationCreateRequest,
    service: OrganizationService = Depends(get_organization_service),
) -> Response:
    return await service.create_organization(body)


@router.get("/{organization_id}", summary="Get an organization")
async def get_organization(
    organization_id: str,
    service: OrganizationService = Depends(get_organization_service),
) -> Response:
    return await service.get_organization(organization_id)


@router.put("/{organization_id}", summary="Rename an organization")
async def update_organization(
    organization_id: str,
    body: OrganizationUpdateRequest,
    service: OrganizationService = Depends(get_organization_service),
) -> Response:
    return await service.update_organization(organization_id, body)


@router.delete(
    "/{organization_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an organization",
)
async def delete_organization(
    organization_id: str,
    service: OrganizationService = Depends(get_organization_service),
) -> Response:
    return await service.delete_organization(organization_id)


@router.get("/{organization_id}/members", summary="List organization members")
async def list_members(
    organization_id: str,
    page: PageParams = Depends(get_page_params),
    search: str | None = Query(default=None, max_length=200),
    service: OrganizationService = Depends(get_organization_service),
) -> Response:
    return await service.list_members(organization_id, page, search=search)
