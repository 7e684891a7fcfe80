"""
Payment repository.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.models.expense import Expense
from worksite.models.party import Party
from worksite.models.payment import Payment, PaymentType
from worksite.models.project import Project
from worksite.repositories.base import CrudRepository, ensure_in_organization, to_float


class PaymentRepository:
    def __init__(self, session: AsyncSession, organization_id: str) -> None:
        self.session = session
        self.organization_id = organization_id
        self.crud: CrudRepository[Payment] = CrudRepository(
            session,
            Payment,
            resource="Payment",
            search_fields=(Payment.notes,),
            order_by=(Payment.payment_date.desc(), Payment.created_at.desc()),
            organization_id=organization_id,
        )

    async def _check_references(self, data: Mapping[str, Any]) -> None:
        refs = (("project_id", Project, "Project"), ("party_id", Party, "Party"), ("expense_id", Expense, "Expense"))
        for key, model, resource in refs:
            if data.get(key) is not None:
                await ensure_in_organization(
                    self.session, model, data[key], self.organization_id, resource
                )

    async def create(self, data: Mapping[str, Any]) -> Payment:
        await self._check_references(data)
        return await self.crud.create(data)

    async def find_by_id(self, id: str) -> Payment | None:
        return await self.crud.find_by_id(id)

    async def find_all(
        self,
        skip: int = 0,
        take: int | None = None,
        search: str | None = None,
        project_id: str | None = None,
        party_id: str | None = None,
        type: PaymentType | None = None,
    ) -> tuple[list[Payment], int]:
        return await self.crud.find_all(
            skip=skip,
            take=take,
            search=search,
            filters={"project_id": project_id, "party_id": party_id, "type": type},
        )

    async def update(self, id: str, data: Mapping[str, Any]) -> Payment:
        await self.crud.get(id)
        await self._check_references(data)
        return await self.crud.update(id, data)

    async def delete(self, id: str) -> None:
        await self.crud.delete(id)

    async def get_payments_summary(
        self,
        project_id: str | None = None,
        type: PaymentType | None = None,
    ) -> dict[str, Any]:
        stmt = (
            select(Payment.type, func.sum(Payment.amount), func.count(Payment.id))
            .where(Payment.organization_id == self.organization_id)
            .group_by(Payment.type)
        )
        if project_id is not None:
            stmt = stmt.where(Payment.project_id == project_id)
        if type is not None:
            stmt = stmt.where(Payment.type == type)
        async with self.crud.guard():
            rows = (await self.session.execute(stmt)).all()

        sums = {t: to_float(amount) for t, amount, _ in rows}
        total_in = sums.get(PaymentType.IN, 0.0)
        total_out = sums.get(PaymentType.OUT, 0.0)
        return {
            "total": total_in + total_out,
            "count": sum(count for _, _, count in rows),
            "total_in": total_in,
            "total_out": total_out,
        }
