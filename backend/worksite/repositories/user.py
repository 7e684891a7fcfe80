"""
User repository.

Users are global (not organization-scoped); memberships link them to organizations.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from worksite.models.member import OrganizationMember
from worksite.models.organization import Organization
from worksite.models.project import Project
from worksite.models.role import Role
from worksite.models.user import User
from worksite.repositories.base import CrudRepository


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.crud: CrudRepository[User] = CrudRepository(
            session,
            User,
            resource="User",
            search_fields=(User.name, User.phone),
        )

    async def create(self, data: Mapping[str, Any]) -> User:
        return await self.crud.create(data)

    async def find_by_id(self, id: str) -> User | None:
        return await self.crud.find_by_id(id)

    async def find_by_phone(self, phone: str) -> User | None:
        return await self.crud.find_by(phone=phone)

    async def find_by_email(self, email: str) -> User | None:
        return await self.crud.find_by(email=email)

    async def find_all(
        self,
        skip: int = 0,
        take: int | None = None,
        search: str | None = None,
    ) -> tuple[list[User], int]:
        return await self.crud.find_all(skip=skip, take=take, search=search)

    async def update(self, id: str, data: Mapping[str, Any]) -> User:
        return await self.crud.update(id, data)

    async def delete(self, id: str) -> None:
        await self.crud.delete(id)

    async def get_user_organizations(self, user_id: str) -> list[dict[str, Any]]:
        """Organizations the user belongs to, with member/project counts and the user's role."""
        counted = aliased(OrganizationMember)
        member_count = (
            select(func.count(counted.id))
            .where(counted.organization_id == Organization.id)
            .correlate(Organization)
            .scalar_subquery()
        )
        project_count = (
            select(func.count(Project.id))
            .where(Project.organization_id == Organization.id)
            .correlate(Organization)
            .scalar_subquery()
        )
        stmt = (
            select(
                Organization,
                OrganizationMember.id,
                Role,
                member_count.label("member_count"),
                project_count.label("project_count"),
            )
            .join(OrganizationMember, OrganizationMember.organization_id == Organization.id)
            .join(Role, Role.id == OrganizationMember.role_id)
            .where(OrganizationMember.user_id == user_id)
            .order_by(OrganizationMember.created_at.desc())
        )
        async with self.crud.guard():
            rows = (await self.session.execute(stmt)).all()

        return [
            {
                "id": org.id,
                "name": org.name,
                "created_at": org.created_at,
                "membership_id": membership_id,
                "role": {"id": role.id, "name": role.name, "is_system_role": role.is_system_role},
                "member_count": members,
                "project_count": projects,
            }
            for org, membership_id, role, members, projects in rows
        ]
