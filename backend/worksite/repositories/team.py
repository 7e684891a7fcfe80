"""
Team repository.

A team member is a User seen through its OrganizationMember row in the
current organization. Team ids are user ids.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from worksite.core.errors import ConflictError, NotFoundError, ValidationFailedError
from worksite.models.member import OrganizationMember
from worksite.models.role import ADMIN_ROLE, Role
from worksite.models.user import User
from worksite.repositories.base import CrudRepository, ensure_in_organization

_USER_FIELDS = ("name", "phone", "email", "location")


def to_team_member(membership: OrganizationMember) -> dict[str, Any]:
    user = membership.user
    return {
        "id": user.id,
        "name": user.name,
        "phone": user.phone,
        "email": user.email,
        "location": user.location,
        "created_at": user.created_at,
        "membership": {
            "id": membership.id,
            "role_id": membership.role_id,
            "role": {
                "id": membership.role.id,
                "name": membership.role.name,
                "is_system_role": membership.role.is_system_role,
            },
        },
    }


class TeamRepository:
    def __init__(self, session: AsyncSession, organization_id: str) -> None:
        self.session = session
        self.organization_id = organization_id
        self.crud: CrudRepository[OrganizationMember] = CrudRepository(
            session,
            OrganizationMember,
            resource="Team member",
            search_fields=(User.name, User.phone, User.email),
            organization_id=organization_id,
        )
        self.users: CrudRepository[User] = CrudRepository(session, User, resource="User")

    def _membership_query(self):  # type: ignore[no-untyped-def]
        return (
            self.crud.base_query()
            .join(User, User.id == OrganizationMember.user_id)
            .options(
                selectinload(OrganizationMember.user),
                selectinload(OrganizationMember.role),
            )
            .execution_options(populate_existing=True)
        )

    async def _membership(self, user_id: str) -> OrganizationMember | None:
        stmt = self._membership_query().where(OrganizationMember.user_id == user_id)
        async with self.crud.guard():
            return (await self.session.execute(stmt)).scalar_one_or_none()

    async def _require_membership(self, user_id: str) -> OrganizationMember:
        membership = await self._membership(user_id)
        if membership is None:
            raise NotFoundError.for_resource("Team member")
        return membership

    async def _admin_count(self) -> int:
        stmt = (
            select(func.count(OrganizationMember.id))
            .join(Role, Role.id == OrganizationMember.role_id)
            .where(
                OrganizationMember.organization_id == self.organization_id,
                Role.name == ADMIN_ROLE,
                Role.is_system_role.is_(True),
            )
        )
        async with self.crud.guard():
            return (await self.session.execute(stmt)).scalar_one()

    async def _guard_last_admin(self, membership: OrganizationMember) -> None:
        role = membership.role
        if role.is_system_role and role.name == ADMIN_ROLE and await self._admin_count() <= 1:
            raise ValidationFailedError(
                "Cannot remove the last admin of the organization",
                code="LAST_ADMIN",
            )

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    async def find_all(
        self,
        skip: int = 0,
        take: int | None = None,
        search: str | None = None,
        role_id: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        memberships, total = await self.crud.find_all(
            skip=skip,
            take=take,
            search=search,
            filters={"role_id": role_id},
            stmt=self._membership_query(),
        )
        return [to_team_member(m) for m in memberships], total

    async def find_by_id(self, user_id: str) -> dict[str, Any] | None:
        membership = await self._membership(user_id)
        return to_team_member(membership) if membership is not None else None

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Find or create the user (by phone, then email) and add it to the organization."""
        role_id = data["role_id"]
        await ensure_in_organization(self.session, Role, role_id, self.organization_id, "Role")

        user: User | None = None
        if data.get("phone"):
            user = await self.users.find_by(phone=data["phone"])
        if user is None and data.get("email"):
            user = await self.users.find_by(email=data["email"])
        if user is None:
            user = await self.users.create({k: data.get(k) for k in _USER_FIELDS})
        elif await self._membership(user.id) is not None:
            raise ConflictError(
                "User is already a member of this organization",
                code="MEMBER_EXISTS",
            )

        await self.crud.create({"user_id": user.id, "role_id": role_id})
        return to_team_member(await self._require_membership(user.id))

    async def update(self, user_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        membership = await self._require_membership(user_id)

        role_id = data.get("role_id")
        if role_id is not None and role_id != membership.role_id:
            await ensure_in_organization(self.session, Role, role_id, self.organization_id, "Role")
            await self._guard_last_admin(membership)
            await self.crud.update(membership.id, {"role_id": role_id})

        user_changes = {k: v for k, v in data.items() if k in _USER_FIELDS}
        if user_changes:
            await self.users.update(user_id, user_changes)

        return to_team_member(await self._require_membership(user_id))

    async def delete(self, user_id: str) -> None:
        """Remove the membership; the user row itself is kept."""
        membership = await self._require_membership(user_id)
        await self._guard_last_admin(membership)
        await self.crud.delete(membership.id)
