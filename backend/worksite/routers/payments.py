"""
Payment endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.database import get_db
from worksite.core.dependencies import OrgContext, PageParams, get_org_context, get_page_params
from worksite.models.payment import PaymentType
from worksite.schemas.payment import PaymentCreateRequest, PaymentUpdateRequest
from worksite.services.payment_service import PaymentService

router = APIRouter()


def get_payment_service(
    db: AsyncSession = Depends(get_db),
    ctx: OrgContext = Depends(get_org_context),
) -> PaymentService:
    return PaymentService(db=db, ctx=ctx)


@router.get("", summary="List payments")
async def list_payments(
    page: PageParams = Depends(get_page_params),
    search: str | None = Query(default=None, max_length=200),
    project_id: str | None = Query(default=None, alias="projectId"),
    party_id: str | None = Query(default=None, alias="partyId"),
    payment_type: PaymentType | None = Query(default=None, alias="type"),
    service: PaymentService = Depends(get_payment_service),
) -> Response:
    return await service.list_payments(
        page, search=search, project_id=project_id, party_id=party_id, type=payment_type,
    )


@router.get("/summary", summary="Money in and out")
async def get_summary(
    project_id: str | None = Query(default=None, alias="projectId"),
    payment_type: PaymentType | None = Query(default=None, alias="type"),
    service: PaymentService = Depends(get_payment_service),
) -> Response:
    return await service.get_summary(project_id=project_id, type=payment_type)


@router.get("/{payment_id}", summary="Get a payment")
async def get_payment(
    payment_id: str,
    service: PaymentService = Depends(get_payment_service),
) -> Response:
    return await service.get_payment(payment_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Record a payment")
async def create_payment(
    body: PaymentCreateRequest,
    service: PaymentService = Depends(get_payment_service),
) -> Response:
    return await service.create_payment(body)


@router.put("/{payment_id}", summary="Update a payment")
async def update_payment(
    payment_id: str,
    body: PaymentUpdateRequest,
    service: PaymentService = Depends(get_payment_service),
) -> Response:
    return await service.update_payment(payment_id, body)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a payment")
async def delete_payment(
    payment_id: str,
    service: PaymentService = Depends(get_payment_service),
) -> Response:
    return await service.delete_payment(payment_id)
