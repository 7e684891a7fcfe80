"""
Role repository.

Roles are organization-scoped. Deletion is guarded at the application level:
system roles and roles that still have members are rejected before any
DELETE reaches the store.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.errors import ConflictError, ValidationFailedError
from worksite.models.member import OrganizationMember
from worksite.models.role import Role
from worksite.repositories.base import CrudRepository


class RoleRepository:
    def __init__(self, session: AsyncSession, organization_id: str) -> None:
        self.session = session
        self.organization_id = organization_id
        self.crud: CrudRepository[Role] = CrudRepository(
            session,
            Role,
            resource="Role",
            search_fields=(Role.name, Role.description),
            order_by=(Role.is_system_role.desc(), Role.created_at.asc()),
            organization_id=organization_id,
        )

    async def create(self, data: Mapping[str, Any]) -> Role:
        return await self.crud.create({**data, "is_system_role": False})

    async def find_by_id(self, id: str) -> Role | None:
        return await self.crud.find_by_id(id)

    async def find_by_name(self, name: str) -> Role | None:
        return await self.crud.find_by(name=name)

    async def find_all(
        self,
        skip: int = 0,
        take: int | None = None,
        search: str | None = None,
    ) -> tuple[list[Role], int]:
        return await self.crud.find_all(skip=skip, take=take, search=search)

    async def update(self, id: str, data: Mapping[str, Any]) -> Role:
        return await self.crud.update(id, data)

    async def member_count(self, role_id: str) -> int:
        stmt = select(func.count(OrganizationMember.id)).where(OrganizationMember.role_id == role_id)
        async with self.crud.guard():
            return (await self.session.execute(stmt)).scalar_one()

    async def member_counts(self, role_ids: list[str]) -> dict[str, int]:
        if not role_ids:
            return {}
        stmt = (
            select(OrganizationMember.role_id, func.count(OrganizationMember.id))
            .where(OrganizationMember.role_id.in_(role_ids))
            .group_by(OrganizationMember.role_id)
        )
        async with self.crud.guard():
            rows = (await self.session.execute(stmt)).all()
        counts = {role_id: 0 for role_id in role_ids}
        counts.update({role_id: count for role_id, count in rows})
        return counts

    async def delete(self, id: str) -> None:
        role = await self.crud.get(id)
        if role.is_system_role:
            raise ValidationFailedError("System roles cannot be deleted", code="SYSTEM_ROLE_DELETE")
        members = await self.member_count(id)
        if members > 0:
            raise ConflictError(
                f"Cannot delete role with {members} assigned member(s)",
                code="ROLE_HAS_MEMBERS",
                details={"memberCount": members},
            )
        await self.crud.delete(id)
