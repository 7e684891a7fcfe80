"""
Stage repository.

Stage statistics are aggregates over the stage's expenses and tasks; they
are recomputed on every read.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.models.expense import Expense
from worksite.models.stage import Stage, StageStatus
from worksite.models.task import Task, TaskStatus
from worksite.repositories.base import CrudRepository, to_float


class StageRepository:
    def __init__(self, session: AsyncSession, organization_id: str) -> None:
        self.session = session
        self.organization_id = organization_id
        self.crud: CrudRepository[Stage] = CrudRepository(
            session,
            Stage,
            resource="Stage",
            search_fields=(Stage.name, Stage.description),
            order_by=(Stage.start_date.asc(), Stage.created_at.asc()),
            organization_id=organization_id,
        )

    async def create(self, data: Mapping[str, Any]) -> Stage:
        return await self.crud.create(data)

    async def find_by_id(self, id: str) -> Stage | None:
        return await self.crud.find_by_id(id)

    async def find_by_project(self, project_id: str) -> list[Stage]:
        items, _ = await self.crud.find_all(filters={"project_id": project_id})
        return items

    async def find_all(
        self,
        skip: int = 0,
        take: int | None = None,
        search: str | None = None,
        project_id: str | None = None,
        status: StageStatus | None = None,
    ) -> tuple[list[Stage], int]:
        return await self.crud.find_all(
            skip=skip,
            take=take,
            search=search,
            filters={"project_id": project_id, "status": status},
        )

    async def update(self, id: str, data: Mapping[str, Any]) -> Stage:
        return await self.crud.update(id, data)

    async def delete(self, id: str) -> None:
        await self.crud.delete(id)

    async def get_stage_stats(self, stage: Stage) -> dict[str, Any]:
        expenses = select(func.sum(Expense.rate * Expense.quantity)).where(
            Expense.organization_id == self.organization_id,
            Expense.stage_id == stage.id,
        )
        tasks = select(
            func.count(Task.id),
            func.sum(case((Task.status == TaskStatus.COMPLETED, 1), else_=0)),
        ).where(Task.stage_id == stage.id)
        async with self.crud.guard():
            total_expenses = to_float((await self.session.execute(expenses)).scalar_one())
            task_count, completed = (await self.session.execute(tasks)).one()

        budget = to_float(stage.budget_amount)
        task_count = task_count or 0
        completed = int(completed or 0)
        return {
            "budget_amount": budget,
            "total_expenses": total_expenses,
            "remaining": budget - total_expenses,
            "percent_used": round(total_expenses / budget * 100, 2) if budget > 0 else 0.0,
            "task_count": task_count,
            "completed_task_count": completed,
            "completion_percent": round(completed / task_count * 100, 2) if task_count else 0.0,
        }
