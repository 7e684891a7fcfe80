"""
Party endpoints: vendors, labour and subcontractors.
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.database import get_db
from worksite.core.dependencies import OrgContext, PageParams, get_org_context, get_page_params
from worksite.models.party import PartyType
from worksite.schemas.party import PartyCreateRequest, PartyUpdateRequest
from worksite.services.party_service import PartyService

router = APIRouter()


def get_party_service(
    db: AsyncSession = Depends(get_db),
    ctx: OrgContext = Depends(get_org_context),
) -> PartyService:
    return PartyService(db=db, ctx=ctx)


@router.get("", summary="List parties with balances")
async def list_parties(
    page: PageParams = Depends(get_page_params),
    search: str | None = Query(default=None, max_length=200),
    party_type: PartyType | None = Query(default=None, alias="type"),
    service: PartyService = Depends(get_party_service),
) -> Response:
    return await service.list_parties(page, search=search, type=party_type)


@router.get("/summary", summary="Party counts and balances by type")
async def get_summary(service: PartyService = Depends(get_party_service)) -> Response:
    return await service.get_summary()


@router.get("/{party_id}", summary="Get a party")
async def get_party(party_id: str, service: PartyService = Depends(get_party_service)) -> Response:
    return await service.get_party(party_id)


@router.get("/{party_id}/stats", summary="Expense and payment totals for a party")
async def get_party_stats(party_id: str, service: PartyService = Depends(get_party_service)) -> Response:
    return await service.get_party_stats(party_id)


@router.get("/{party_id}/projects", summary="Projects a party has worked on")
async def get_party_projects(
    party_id: str,
    page: PageParams = Depends(get_page_params),
    service: PartyService = Depends(get_party_service),
) -> Response:
    return await service.get_party_projects(party_id, page)


@router.get("/{party_id}/transactions", summary="Expense and payment ledger of a party")
async def get_party_transactions(
    party_id: str,
    page: PageParams = Depends(get_page_params),
    tab: Literal["expense", "payment"] | None = Query(default=None, alias="type"),
    project_id: str | None = Query(default=None, alias="projectId"),
    service: PartyService = Depends(get_party_service),
) -> Response:
    return await service.get_party_transactions(party_id, page, type=tab, project_id=project_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a party")
async def create_party(
    body: PartyCreateRequest,
    service: PartyService = Depends(get_party_service),
) -> Response:
    return await service.create_party(body)


@router.put("/{party_id}", summary="Update a party")
async def update_party(
    party_id: str,
    body: PartyUpdateRequest,
    service: PartyService = Depends(get_party_service),
) -> Response:
    return await service.update_party(party_id, body)


@router.delete("/{party_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a party")
async def delete_party(party_id: str, service: PartyService = Depends(get_party_service)) -> Response:
    return await service.delete_party(party_id)
