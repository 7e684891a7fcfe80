"""
Expense repository.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.models.category import (
    EXPENSE_TYPE,
    LABOUR_TYPE,
    MATERIAL_TYPE,
    SUB_WORK_TYPE,
    CategoryItem,
)
from worksite.models.expense import Expense, ExpenseStatus
from worksite.models.party import Party
from worksite.models.project import Project
from worksite.models.stage import Stage
from worksite.repositories.base import CrudRepository, ensure_in_organization, to_float
from worksite.repositories.category import CategoryRepository

# Item reference column -> (category type key, wire field name)
_CATEGORY_REFS = {
    "expense_type_item_id": (EXPENSE_TYPE, "expenseTypeItemId"),
    "material_type_item_id": (MATERIAL_TYPE, "materialTypeItemId"),
    "labour_type_item_id": (LABOUR_TYPE, "labourTypeItemId"),
    "sub_work_type_item_id": (SUB_WORK_TYPE, "subWorkTypeItemId"),
}


class ExpenseRepository:
    def __init__(self, session: AsyncSession, organization_id: str) -> None:
        self.session = session
        self.organization_id = organization_id
        self.crud: CrudRepository[Expense] = CrudRepository(
            session,
            Expense,
            resource="Expense",
            search_fields=(Expense.description, Expense.notes),
            search_clauses=(
                lambda pattern: Expense.party.has(Party.name.ilike(pattern, escape="\\")),
            ),
            order_by=(Expense.expense_date.desc(), Expense.created_at.desc()),
            organization_id=organization_id,
        )
        self.categories = CategoryRepository(session, organization_id)

    async def _check_references(self, data: Mapping[str, Any]) -> None:
        refs = (("project_id", Project, "Project"), ("party_id", Party, "Party"), ("stage_id", Stage, "Stage"))
        for key, model, resource in refs:
            if data.get(key) is not None:
                await ensure_in_organization(
                    self.session, model, data[key], self.organization_id, resource
                )
        for key, (type_key, field) in _CATEGORY_REFS.items():
            if data.get(key) is not None:
                await self.categories.ensure_item_of_type(data[key], type_key, field)

    async def create(self, data: Mapping[str, Any]) -> Expense:
        await self._check_references(data)
        return await self.crud.create(data)

    async def find_by_id(self, id: str) -> Expense | None:
        return await self.crud.find_by_id(id)

    async def find_all(
        self,
        skip: int = 0,
        take: int | None = None,
        search: str | None = None,
        project_id: str | None = None,
        party_id: str | None = None,
        stage_id: str | None = None,
        category_id: str | None = None,
        status: ExpenseStatus | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> tuple[list[Expense], int]:
        conditions = []
        if start_date is not None:
            conditions.append(Expense.expense_date >= start_date)
        if end_date is not None:
            conditions.append(Expense.expense_date <= end_date)
        return await self.crud.find_all(
            skip=skip,
            take=take,
            search=search,
            filters={
                "project_id": project_id,
                "party_id": party_id,
                "stage_id": stage_id,
                "expense_type_item_id": category_id,
                "status": status,
            },
            conditions=conditions,
        )

    async def update(self, id: str, data: Mapping[str, Any]) -> Expense:
        await self.crud.get(id)
        await self._check_references(data)
        return await self.crud.update(id, data)

    async def delete(self, id: str) -> None:
        await self.crud.delete(id)

    async def get_expenses_by_category(self, project_id: str | None = None) -> list[dict[str, Any]]:
        """Total value and count per expense type item, largest first."""
        total = func.sum(Expense.rate * Expense.quantity)
        stmt = (
            select(CategoryItem.id, CategoryItem.name, total, func.count(Expense.id))
            .select_from(Expense)
            .join(CategoryItem, CategoryItem.id == Expense.expense_type_item_id)
            .where(Expense.organization_id == self.organization_id)
            .group_by(CategoryItem.id, CategoryItem.name)
            .order_by(total.desc(), CategoryItem.name)
        )
        if project_id is not None:
            stmt = stmt.where(Expense.project_id == project_id)
        async with self.crud.guard():
            rows = (await self.session.execute(stmt)).all()
        return [
            {"category_id": item_id, "category_name": name, "total": to_float(amount), "count": count}
            for item_id, name, amount, count in rows
        ]
