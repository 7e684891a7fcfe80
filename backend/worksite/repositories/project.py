"""
Project repository.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.models.expense import Expense
from worksite.models.payment import Payment, PaymentType
from worksite.models.project import Project, ProjectStatus
from worksite.repositories.base import CrudRepository, to_float


class ProjectRepository:
    def __init__(self, session: AsyncSession, organization_id: str) -> None:
        self.session = session
        self.organization_id = organization_id
        self.crud: CrudRepository[Project] = CrudRepository(
            session,
            Project,
            resource="Project",
            search_fields=(Project.name, Project.location),
            organization_id=organization_id,
        )

    async def create(self, data: Mapping[str, Any]) -> Project:
        return await self.crud.create(data)

    async def find_by_id(self, id: str) -> Project | None:
        return await self.crud.find_by_id(id)

    async def find_all(
        self,
        skip: int = 0,
        take: int | None = None,
        search: str | None = None,
        status: ProjectStatus | None = None,
    ) -> tuple[list[Project], int]:
        return await self.crud.find_all(
            skip=skip, take=take, search=search, filters={"status": status}
        )

    async def update(self, id: str, data: Mapping[str, Any]) -> Project:
        return await self.crud.update(id, data)

    async def delete(self, id: str) -> None:
        await self.crud.delete(id)

    async def get_project_stats(self, project_id: str) -> dict[str, float]:
        """Expense value against money received; balance = payments in - expenses."""
        expenses = select(func.sum(Expense.rate * Expense.quantity)).where(
            Expense.organization_id == self.organization_id,
            Expense.project_id == project_id,
        )
        payments = (
            select(Payment.type, func.sum(Payment.amount))
            .where(
                Payment.organization_id == self.organization_id,
                Payment.project_id == project_id,
            )
            .group_by(Payment.type)
        )
        async with self.crud.guard():
            total_expenses = to_float((await self.session.execute(expenses)).scalar_one())
            by_type = {t: to_float(s) for t, s in (await self.session.execute(payments)).all()}

        total_in = by_type.get(PaymentType.IN, 0.0)
        total_out = by_type.get(PaymentType.OUT, 0.0)
        return {
            "total_expenses": total_expenses,
            "total_payments": total_in + total_out,
            "total_payments_in": total_in,
            "total_payments_out": total_out,
            "balance": total_in - total_expenses,
        }
