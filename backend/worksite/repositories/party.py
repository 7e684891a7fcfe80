"""
Party repository.

Balances are derived: what the organization owes a party is the value of
its expenses (rate * quantity) minus the payments made to it.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import String, func, literal, select, union_all
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.models.category import CategoryItem
from worksite.models.expense import Expense
from worksite.models.party import Party, PartyType
from worksite.models.payment import Payment
from worksite.models.project import Project
from worksite.repositories.base import CrudRepository, to_float

TRANSACTION_TABS = ("expense", "payment")


class PartyRepository:
    def __init__(self, session: AsyncSession, organization_id: str) -> None:
        self.session = session
        self.organization_id = organization_id
        self.crud: CrudRepository[Party] = CrudRepository(
            session,
            Party,
            resource="Party",
            search_fields=(Party.name, Party.phone, Party.location),
            organization_id=organization_id,
        )

    # -----------------------------------------------------------------------
    # CRUD
    # -----------------------------------------------------------------------

    async def create(self, data: Mapping[str, Any]) -> Party:
        return await self.crud.create(data)

    async def find_by_id(self, id: str) -> Party | None:
        return await self.crud.find_by_id(id)

    async def find_all(
        self,
        skip: int = 0,
        take: int | None = None,
        search: str | None = None,
        type: PartyType | None = None,
    ) -> tuple[list[Party], int]:
        return await self.crud.find_all(skip=skip, take=take, search=search, filters={"type": type})

    async def update(self, id: str, data: Mapping[str, Any]) -> Party:
        return await self.crud.update(id, data)

    async def delete(self, id: str) -> None:
        await self.crud.delete(id)

    # -----------------------------------------------------------------------
    # Aggregates
    # -----------------------------------------------------------------------

    def _expense_totals(self):  # type: ignore[no-untyped-def]
        return select(func.sum(Expense.rate * Expense.quantity)).where(
            Expense.organization_id == self.organization_id
        )

    def _payment_totals(self):  # type: ignore[no-untyped-def]
        return select(func.sum(Payment.amount)).where(
            Payment.organization_id == self.organization_id
        )

    async def balances(self, party_ids: list[str]) -> dict[str, float]:
        """Balance per party id for a page of parties."""
        if not party_ids:
            return {}
        expenses = (
            select(Expense.party_id, func.sum(Expense.rate * Expense.quantity))
            .where(Expense.organization_id == self.organization_id, Expense.party_id.in_(party_ids))
            .group_by(Expense.party_id)
        )
        payments = (
            select(Payment.party_id, func.sum(Payment.amount))
            .where(Payment.organization_id == self.organization_id, Payment.party_id.in_(party_ids))
            .group_by(Payment.party_id)
        )
        async with self.crud.guard():
            spent = {pid: to_float(total) for pid, total in (await self.session.execute(expenses)).all()}
            paid = {pid: to_float(total) for pid, total in (await self.session.execute(payments)).all()}
        return {pid: spent.get(pid, 0.0) - paid.get(pid, 0.0) for pid in party_ids}

    async def get_party_stats(self, party_id: str) -> dict[str, float]:
        async with self.crud.guard():
            total_expenses = to_float(
                (await self.session.execute(
                    self._expense_totals().where(Expense.party_id == party_id)
                )).scalar_one()
            )
            total_payments = to_float(
                (await self.session.execute(
                    self._payment_totals().where(Payment.party_id == party_id)
                )).scalar_one()
            )
        return {
            "total_expenses": total_expenses,
            "total_payments": total_payments,
            "balance": total_expenses - total_payments,
        }

    async def get_summary(self) -> dict[str, Any]:
        """Party counts and outstanding balances per party type."""
        counts_stmt = (
            select(Party.type, func.count(Party.id))
            .where(Party.organization_id == self.organization_id)
            .group_by(Party.type)
        )
        expenses_stmt = (
            select(Party.type, func.sum(Expense.rate * Expense.quantity))
            .join(Party, Party.id == Expense.party_id)
            .where(Expense.organization_id == self.organization_id)
            .group_by(Party.type)
        )
        payments_stmt = (
            select(Party.type, func.sum(Payment.amount))
            .join(Party, Party.id == Payment.party_id)
            .where(Payment.organization_id == self.organization_id)
            .group_by(Party.type)
        )
        async with self.crud.guard():
            counts = dict((await self.session.execute(counts_stmt)).all())
            spent = {t: to_float(s) for t, s in (await self.session.execute(expenses_stmt)).all()}
            paid = {t: to_float(s) for t, s in (await self.session.execute(payments_stmt)).all()}

        def balance(party_type: PartyType) -> float:
            return spent.get(party_type, 0.0) - paid.get(party_type, 0.0)

        return {
            "total_vendors": counts.get(PartyType.VENDOR, 0),
            "total_labours": counts.get(PartyType.LABOUR, 0),
            "total_subcontractors": counts.get(PartyType.SUBCONTRACTOR, 0),
            "vendors_balance": balance(PartyType.VENDOR),
            "labours_balance": balance(PartyType.LABOUR),
            "subcontractors_balance": balance(PartyType.SUBCONTRACTOR),
        }

    async def get_party_projects(
        self,
        party_id: str,
        skip: int = 0,
        take: int | None = None,
    ) -> dict[str, Any]:
        """Projects the party has expenses or payments on, with the credit owed per project."""
        expenses_stmt = (
            select(Expense.project_id, func.sum(Expense.rate * Expense.quantity))
            .where(Expense.organization_id == self.organization_id, Expense.party_id == party_id)
            .group_by(Expense.project_id)
        )
        payments_stmt = (
            select(Payment.project_id, func.sum(Payment.amount))
            .where(Payment.organization_id == self.organization_id, Payment.party_id == party_id)
            .group_by(Payment.project_id)
        )
        async with self.crud.guard():
            spent = {p: to_float(s) for p, s in (await self.session.execute(expenses_stmt)).all()}
            paid = {p: to_float(s) for p, s in (await self.session.execute(payments_stmt)).all()}
            project_ids = set(spent) | set(paid)
            names = dict(
                (await self.session.execute(
                    select(Project.id, Project.name).where(Project.id.in_(project_ids))
                )).all()
            ) if project_ids else {}

        projects = sorted(
            (
                {
                    "id": pid,
                    "name": names.get(pid, ""),
                    "total_expenses": spent.get(pid, 0.0),
                    "total_payments": paid.get(pid, 0.0),
                    "credit": spent.get(pid, 0.0) - paid.get(pid, 0.0),
                }
                for pid in project_ids
            ),
            key=lambda p: (p["name"].lower(), p["id"]),
        )
        total_expenses = sum(spent.values())
        total_payments = sum(paid.values())
        end = None if take is None else skip + take
        return {
            "projects": projects[skip:end],
            "total": len(projects),
            "totals": {
                "total_expenses": total_expenses,
                "total_payments": total_payments,
                "credit": total_expenses - total_payments,
            },
        }

    async def get_party_transactions(
        self,
        party_id: str,
        type: str | None = None,
        project_id: str | None = None,
        skip: int = 0,
        take: int | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """Expenses and payments of a party as one ledger, newest first."""
        expenses = (
            select(
                Expense.id.label("id"),
                literal("expense", String).label("tab"),
                Expense.expense_date.label("date"),
                func.coalesce(Expense.description, CategoryItem.name).label("title"),
                (Expense.rate * Expense.quantity).label("amount"),
                Expense.project_id.label("project_id"),
                Expense.created_at.label("created_at"),
            )
            .join(CategoryItem, CategoryItem.id == Expense.expense_type_item_id)
            .where(Expense.organization_id == self.organization_id, Expense.party_id == party_id)
        )
        payments = select(
            Payment.id.label("id"),
            literal("payment", String).label("tab"),
            Payment.payment_date.label("date"),
            func.coalesce(Payment.notes, literal("Payment", String)).label("title"),
            Payment.amount.label("amount"),
            Payment.project_id.label("project_id"),
            Payment.created_at.label("created_at"),
        ).where(Payment.organization_id == self.organization_id, Payment.party_id == party_id)

        if project_id is not None:
            expenses = expenses.where(Expense.project_id == project_id)
            payments = payments.where(Payment.project_id == project_id)

        parts = {"expense": expenses, "payment": payments}
        selected = [parts[type]] if type in parts else list(parts.values())
        ledger = (union_all(*selected) if len(selected) > 1 else selected[0]).subquery()

        count_stmt = select(func.count()).select_from(ledger)
        page_stmt = (
            select(ledger)
            .order_by(ledger.c.date.desc(), ledger.c.created_at.desc())
            .offset(skip)
        )
        if take is not None:
            page_stmt = page_stmt.limit(take)

        async with self.crud.guard():
            total = (await self.session.execute(count_stmt)).scalar_one()
            rows = (await self.session.execute(page_stmt)).mappings().all()

        return [
            {
                "id": row["id"],
                "tab": row["tab"],
                "date": row["date"],
                "title": row["title"],
                "amount": to_float(row["amount"]),
                "project_id": row["project_id"],
            }
            for row in rows
        ], total
