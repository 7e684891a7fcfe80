"""
User endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.database import get_db
from worksite.core.dependencies import PageParams, get_page_params
from worksite.schemas.user import UserCreateRequest, UserUpdateRequest
from worksite.services.user_service import UserService

router = APIRouter()


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db=db)


@router.get("", summary="List users")
async def list_users(
    page: PageParams = Depends(get_page_params),
    search: str | None = Query(default=None, max_length=200),
    service: UserService = Depends(get_user_service),
) -> Response:
    return await service.list_users(page, search=search)


@router.get("/by-phone", summary="Find a user by phone number")
async def get_user_by_phone(
    phone: str = Query(min_length=1, max_length=20),
    service: UserService = Depends(get_user_service),
) -> Response:
    return await service.get_user_by_phone(phone)


@router.get("/{user_id}", summary="Get a user")
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> Response:
    return await service.get_user(user_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a user")
async def create_user(
    body: UserCreateRequest,
    service: UserService = Depends(get_user_service),
) -> Response:
    return await service.create_user(body)


@router.put("/{user_id}", summary="Update a user")
async def update_user(
    user_id: str,
    body: UserUpdateRequest,
    service: UserService = Depends(get_user_service),
) -> Response:
    return await service.update_user(user_id, body)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a user")
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> Response:
    return await service.delete_user(user_id)


@router.get("/{user_id}/organizations", summary="Organizations a user belongs to")
async def get_user_organizations(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> Response:
    return await service.get_user_organizations(user_id)
