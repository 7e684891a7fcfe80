"""
Organization repository.

Creating an organization seeds its system roles and default categories and
makes the creator an Admin member. Member and project counts are derived,
never stored.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.errors import NotFoundError
from worksite.models.member import OrganizationMember
from worksite.models.organization import Organization
from worksite.models.project import Project
from worksite.models.role import ADMIN_ROLE, SYSTEM_ROLES, Role
from worksite.models.user import User
from worksite.repositories.base import CrudRepository
from worksite.repositories.category import seed_default_categories


class OrganizationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.crud: CrudRepository[Organization] = CrudRepository(
            session,
            Organization,
            resource="Organization",
            search_fields=(Organization.name,),
        )

    async def create(self, data: Mapping[str, Any], creator_id: str) -> Organization:
        async with self.crud.guard():
            creator = await self.session.get(User, creator_id)
        if creator is None:
            raise NotFoundError.for_resource("User")

        organization = await self.crud.create(data)
        async with self.crud.guard():
            roles = {
                name: Role(
                    organization_id=organization.id,
                    name=name,
                    description=description,
                    is_system_role=True,
                )
                for name, description in SYSTEM_ROLES.items()
            }
            self.session.add_all(roles.values())
            await self.session.flush()
            self.session.add(
                OrganizationMember(
                    organization_id=organization.id,
                    user_id=creator.id,
                    role_id=roles[ADMIN_ROLE].id,
                )
            )
            await self.session.flush()
            await seed_default_categories(self.session, organization.id)
        return organization

    async def find_by_id(self, id: str) -> Organization | None:
        return await self.crud.find_by_id(id)

    async def counts(self, id: str) -> dict[str, int]:
        members = select(func.count(OrganizationMember.id)).where(
            OrganizationMember.organization_id == id
        )
        projects = select(func.count(Project.id)).where(Project.organization_id == id)
        async with self.crud.guard():
            member_count = (await self.session.execute(members)).scalar_one()
            project_count = (await self.session.execute(projects)).scalar_one()
        return {"member_count": member_count, "project_count": project_count}

    async def is_member(self, organization_id: str, user_id: str) -> bool:
        stmt = select(func.count(OrganizationMember.id)).where(
            OrganizationMember.organization_id == organization_id,
            OrganizationMember.user_id == user_id,
        )
        async with self.crud.guard():
            return (await self.session.execute(stmt)).scalar_one() > 0

    async def update(self, id: str, data: Mapping[str, Any]) -> Organization:
        return await self.crud.update(id, data)

    async def delete(self, id: str) -> None:
        await self.crud.delete(id)
