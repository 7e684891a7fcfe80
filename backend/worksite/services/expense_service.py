"""
Expense business logic.
"""

from __future__ import annotations

from datetime import date

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
from worksite.models.expense import ExpenseStatus
from worksite.repositories.base import with_decimals
from worksite.repositories.expense import ExpenseRepository
from worksite.schemas.expense import (
    ExpenseCategorySummary,
    ExpenseCreateRequest,
    ExpenseResponse,
    ExpenseUpdateRequest,
)

handle = error_handler("expense")

_NUMERIC = ("rate", "quantity")


class ExpenseService:
    def __init__(self, db: AsyncSession, ctx: OrgContext) -> None:
        self.db = db
        self.expenses = ExpenseRepository(db, ctx.organization_id)

    @handle("fetch")
    async def list_expenses(
        self,
        page: PageParams,
        search: str | None = None,
        project_id: str | None = None,
        party_id: str | None = None,
        stage_id: str | None = None,
        category_id: str | None = None,
        status: ExpenseStatus | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Response:
        if start_date and end_date and end_date < start_date:
            raise ValidationFailedError("endDate must not be before startDate")
        expenses, total = await self.expenses.find_all(
            skip=page.skip,
            take=page.limit,
            search=search,
            project_id=project_id,
            party_id=party_id,
            stage_id=stage_id,
            category_id=category_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
        )
        return send_paginated(
            [ExpenseResponse.model_validate(e) for e in expenses],
            build_pagination(page.page, page.limit, total),
        )

    @handle("fetch")
    async def get_summary_by_category(self, project_id: str | None = None) -> Response:
        summary = await self.expenses.get_expenses_by_category(project_id)
        return send_success([ExpenseCategorySummary.model_validate(s) for s in summary])

    @handle("fetch")
    async def get_expense(self, expense_id: str) -> Response:
        expense = await self.expenses.find_by_id(expense_id)
        if expense is None:
            return send_not_found("Expense")
        return send_success(ExpenseResponse.model_validate(expense))

    @handle("create")
    async def create_expense(self, body: ExpenseCreateRequest) -> Response:
        expense = await self.expenses.create(with_decimals(body.model_dump(), *_NUMERIC))
        return send_created(ExpenseResponse.model_validate(expense))

    @handle("update")
    async def update_expense(self, expense_id: str, body: ExpenseUpdateRequest) -> Response:
        expense = await self.expenses.update(
            expense_id, with_decimals(body.model_dump(exclude_unset=True), *_NUMERIC)
        )
        return send_success(ExpenseResponse.model_validate(expense))

    @handle("delete")
    async def delete_expense(self, expense_id: str) -> Response:
        await self.expenses.delete(expense_id)
        return send_no_content()
