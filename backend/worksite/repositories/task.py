"""
Task repository.

Tasks belong to one stage. Member assignments must reference members of the
organization; party assignments must reference labour or subcontractor
parties of the organization.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from worksite.core.errors import NotFoundError, ValidationFailedError
from worksite.models.member import OrganizationMember
from worksite.models.party import ASSIGNABLE_PARTY_TYPES, Party
from worksite.models.stage import Stage
from worksite.models.task import Task, TaskMemberAssignment, TaskPartyAssignment, TaskStatus
from worksite.repositories.base import CrudRepository, ensure_in_organization


def to_task(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "organization_id": task.organization_id,
        "stage_id": task.stage_id,
        "name": task.name,
        "description": task.description,
        "days_allocated": task.days_allocated,
        "status": task.status,
        "members": [
            {"id": a.user.id, "name": a.user.name, "phone": a.user.phone}
            for a in task.member_assignments
        ],
        "parties": [
            {"id": a.party.id, "name": a.party.name, "type": a.party.type}
            for a in task.party_assignments
        ],
        "created_at": task.created_at,
        "updated_at": task.updated_at,
    }


class TaskRepository:
    def __init__(self, session: AsyncSession, organization_id: str) -> None:
        self.session = session
        self.organization_id = organization_id
        self.crud: CrudRepository[Task] = CrudRepository(
            session,
            Task,
            resource="Task",
            search_fields=(Task.name, Task.description),
            order_by=(Task.created_at.asc(),),
            organization_id=organization_id,
        )

    def _detail_query(self):  # type: ignore[no-untyped-def]
        return (
            self.crud.base_query()
            .options(
                selectinload(Task.member_assignments).selectinload(TaskMemberAssignment.user),
                selectinload(Task.party_assignments).selectinload(TaskPartyAssignment.party),
            )
            .execution_options(populate_existing=True)
        )

    # -----------------------------------------------------------------------
    # Assignment validation
    # -----------------------------------------------------------------------

    async def _validate_members(self, member_ids: Sequence[str]) -> None:
        if not member_ids:
            return
        stmt = select(OrganizationMember.user_id).where(
            OrganizationMember.organization_id == self.organization_id,
            OrganizationMember.user_id.in_(member_ids),
        )
        async with self.crud.guard():
            found = set((await self.session.execute(stmt)).scalars().all())
        missing = sorted(set(member_ids) - found)
        if missing:
            raise ValidationFailedError(
                "Assigned members must belong to the organization",
                code="INVALID_MEMBER",
                details={"memberIds": missing},
            )

    async def _validate_parties(self, party_ids: Sequence[str]) -> None:
        if not party_ids:
            return
        stmt = select(Party.id, Party.type).where(
            Party.organization_id == self.organization_id,
            Party.id.in_(party_ids),
        )
        async with self.crud.guard():
            found = dict((await self.session.execute(stmt)).all())
        missing = sorted(set(party_ids) - set(found))
        if missing:
            raise ValidationFailedError(
                "Assigned parties must belong to the organization",
                code="INVALID_PARTY",
                details={"partyIds": missing},
            )
        wrong_type = sorted(pid for pid, ptype in found.items() if ptype not in ASSIGNABLE_PARTY_TYPES)
        if wrong_type:
            raise ValidationFailedError(
                "Only labour and subcontractor parties can be assigned to tasks",
                code="INVALID_PARTY_TYPE",
                details={"partyIds": wrong_type},
            )

    async def _replace_assignments(
        self,
        task_id: str,
        member_ids: Sequence[str] | None,
        party_ids: Sequence[str] | None,
    ) -> None:
        async with self.crud.guard():
            if member_ids is not None:
                await self.session.execute(
                    delete(TaskMemberAssignment).where(TaskMemberAssignment.task_id == task_id)
                )
                self.session.add_all(
                    TaskMemberAssignment(task_id=task_id, user_id=uid)
                    for uid in dict.fromkeys(member_ids)
                )
            if party_ids is not None:
                await self.session.execute(
                    delete(TaskPartyAssignment).where(TaskPartyAssignment.task_id == task_id)
                )
                self.session.add_all(
                    TaskPartyAssignment(task_id=task_id, party_id=pid)
                    for pid in dict.fromkeys(party_ids)
                )
            await self.session.flush()

    # -----------------------------------------------------------------------
    # CRUD
    # -----------------------------------------------------------------------

    async def find_by_id(self, id: str) -> dict[str, Any] | None:
        async with self.crud.guard():
            task = (
                await self.session.execute(self._detail_query().where(Task.id == id))
            ).scalar_one_or_none()
        return to_task(task) if task is not None else None

    async def get(self, id: str) -> dict[str, Any]:
        task = await self.find_by_id(id)
        if task is None:
            raise NotFoundError.for_resource("Task")
        return task

    async def find_all(
        self,
        skip: int = 0,
        take: int | None = None,
        search: str | None = None,
        stage_id: str | None = None,
        project_id: str | None = None,
        status: TaskStatus | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        conditions = []
        if project_id is not None:
            conditions.append(
                Task.stage_id.in_(select(Stage.id).where(Stage.project_id == project_id))
            )
        tasks, total = await self.crud.find_all(
            skip=skip,
            take=take,
            search=search,
            filters={"stage_id": stage_id, "status": status},
            conditions=conditions,
            stmt=self._detail_query(),
        )
        return [to_task(t) for t in tasks], total

    async def find_by_stage(self, stage_id: str) -> list[dict[str, Any]]:
        items, _ = await self.find_all(stage_id=stage_id)
        return items

    async def find_by_project(self, project_id: str) -> list[dict[str, Any]]:
        items, _ = await self.find_all(project_id=project_id)
        return items

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        values = dict(data)
        member_ids = values.pop("member_ids", None) or []
        party_ids = values.pop("party_ids", None) or []

        await ensure_in_organization(
            self.session, Stage, values["stage_id"], self.organization_id, "Stage"
        )
        await self._validate_members(member_ids)
        await self._validate_parties(party_ids)

        task = await self.crud.create(values)
        await self._replace_assignments(task.id, member_ids, party_ids)
        return await self.get(task.id)

    async def update(self, id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        values = dict(data)
        member_ids = values.pop("member_ids", None)
        party_ids = values.pop("party_ids", None)

        if not await self.crud.exists(id):
            raise NotFoundError.for_resource("Task")
        if values.get("stage_id") is not None:
            await ensure_in_organization(
                self.session, Stage, values["stage_id"], self.organization_id, "Stage"
            )
        if member_ids is not None:
            await self._validate_members(member_ids)
        if party_ids is not None:
            await self._validate_parties(party_ids)

        if values:
            await self.crud.update(id, values)
        await self._replace_assignments(id, member_ids, party_ids)
        return await self.get(id)

    async def update_status(self, id: str, status: TaskStatus) -> dict[str, Any]:
        await self.crud.update(id, {"status": status})
        return await self.get(id)

    async def delete(self, id: str) -> None:
        await self.crud.delete(id)
