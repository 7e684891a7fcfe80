"""
Expense endpoints.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.database import get_db
from worksite.core.dependencies import OrgContext, PageParams, get_org_context, get_page_params
from worksite.models.expense import ExpenseStatus
from worksite.schemas.expense import ExpenseCreateRequest, ExpenseUpdateRequest
from worksite.services.expense_service import ExpenseService

router = APIRouter()


def get_expense_service(
    db: AsyncSession = Depends(get_db),
    ctx: OrgContext = Depends(get_org_context),
) -> ExpenseService:
    return ExpenseService(db=db, ctx=ctx)


@router.get("", summary="List expenses")
async def list_expenses(
    page: PageParams = Depends(get_page_params),
    search: str | None = Query(default=None, max_length=200),
    project_id: str | None = Query(default=None, alias="projectId"),
    party_id: str | None = Query(default=None, alias="partyId"),
    stage_id: str | None = Query(default=None, alias="stageId"),
    category_id: str | None = Query(default=None, alias="categoryId"),
    expense_status: ExpenseStatus | None = Query(default=None, alias="status"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    service: ExpenseService = Depends(get_expense_service),
) -> Response:
    return await service.list_expenses(
        page,
        search=search,
        project_id=project_id,
        party_id=party_id,
        stage_id=stage_id,
        category_id=category_id,
        status=expense_status,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/summary/by-category", summary="Expense totals per category")
async def get_summary_by_category(
    project_id: str | None = Query(default=None, alias="projectId"),
    service: ExpenseService = Depends(get_expense_service),
) -> Response:
    return await service.get_summary_by_category(project_id)


@router.get("/{expense_id}", summary="Get an expense")
async def get_expense(
    expense_id: str,
    service: ExpenseService = Depends(get_expense_service),
) -> Response:
    return await service.get_expense(expense_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Record an expense")
async def create_expense(
    body: ExpenseCreateRequest,
    service: ExpenseService = Depends(get_expense_service),
) -> Response:
    return await service.create_expense(body)


@router.put("/{expense_id}", summary="Update an expense")
async def update_expense(
    expense_id: str,
    body: ExpenseUpdateRequest,
    service: ExpenseService = Depends(get_expense_service),
) -> Response:
    return await service.update_expense(expense_id, body)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an expense")
async def delete_expense(
    expense_id: str,
    service: ExpenseService = Depends(get_expense_service),
) -> Response:
    return await service.delete_expense(expense_id)
