"""
User business logic.

Users are global; organization membership is managed through the team endpoints.
"""

from __future__ import annotations

from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.dependencies import PageParams
from worksite.core.error_handler import error_handler
from worksite.core.responses import (
    build_pagination,
    send_created,
    send_no_content,
    send_not_found,
    send_paginated,
    send_success,
)
from worksite.repositories.user import UserRepository
from worksite.schemas.user import (
    UserCreateRequest,
    UserOrganizationResponse,
    UserResponse,
    UserUpdateRequest,
)

handle = error_handler("user")


class UserService:
    """Handles all user operations."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.users = UserRepository(db)

    @handle("fetch")
    async def list_users(self, page: PageParams, search: str | None = None) -> Response:
        users, total = await self.users.find_all(skip=page.skip, take=page.limit, search=search)
        return send_paginated(
            [UserResponse.model_validate(u) for u in users],
            build_pagination(page.page, page.limit, total),
        )

    @handle("fetch")
    async def get_user(self, user_id: str) -> Response:
        user = await self.users.find_by_id(user_id)
        if user is None:
            return send_not_found("User")
        return send_success(UserResponse.model_validate(user))

    @handle("fetch")
    async def get_user_by_phone(self, phone: str) -> Response:
        user = await self.users.find_by_phone(phone)
        if user is None:
            return send_not_found("User")
        return send_success(UserResponse.model_validate(user))

    @handle("create")
    async def create_user(self, body: UserCreateRequest) -> Response:
        user = await self.users.create(body.model_dump())
        return send_created(UserResponse.model_validate(user))

    @handle("update")
    async def update_user(self, user_id: str, body: UserUpdateRequest) -> Response:
        user = await self.users.update(user_id, body.model_dump(exclude_unset=True))
        return send_success(UserResponse.model_validate(user))

    @handle("delete")
    async def delete_user(self, user_id: str) -> Response:
        await self.users.delete(user_id)
        return send_no_content()

    @handle("fetch")
    async def get_user_organizations(self, user_id: str) -> Response:
        if await self.users.find_by_id(user_id) is None:
            return send_not_found("User")
        organizations = await self.users.get_user_organizations(user_id)
        return send_success([UserOrganizationResponse.model_validate(o) for o in organizations])
