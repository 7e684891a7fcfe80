"""
Category endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.database import get_db
from worksite.core.dependencies import OrgContext, get_org_context
from worksite.schemas.category import CategoryItemCreateRequest, CategoryItemUpdateRequest
from worksite.services.category_service import CategoryService

router = APIRouter()


def get_category_service(
    db: AsyncSession = Depends(get_db),
    ctx: OrgContext = Depends(get_org_context),
) -> CategoryService:
    return CategoryService(db=db, ctx=ctx)


@router.get("/types", summary="List category types with their items")
async def list_category_types(
    include_inactive: bool = Query(default=False, alias="includeInactive"),
    service: CategoryService = Depends(get_category_service),
) -> Response:
    return await service.list_types(include_inactive)


@router.get("/types/key/{key}", summary="Get a category type by key")
async def get_category_type_by_key(
    key: str,
    service: CategoryService = Depends(get_category_service),
) -> Response:
    return await service.get_type_by_key(key)


@router.get("/items/type/{type_key}", summary="List the items of a category type")
async def list_category_items_by_type(
    type_key: str,
    include_inactive: bool = Query(default=False, alias="includeInactive"),
    service: CategoryService = Depends(get_category_service),
) -> Response:
    return await service.list_items_by_type_key(type_key, include_inactive)


@router.get("/items/{item_id}", summary="Get a category item")
async def get_category_item(
    item_id: str,
    service: CategoryService = Depends(get_category_service),
) -> Response:
    return await service.get_item(item_id)


@router.post("/items", status_code=status.HTTP_201_CREATED, summary="Create a category item")
async def create_category_item(
    body: CategoryItemCreateRequest,
    service: CategoryService = Depends(get_category_service),
) -> Response:
    return await service.create_item(body)


@router.put("/items/{item_id}", summary="Update a category item")
async def update_category_item(
    item_id: str,
    body: CategoryItemUpdateRequest,
    service: CategoryService = Depends(get_category_service),
) -> Response:
    return await service.update_item(item_id, body)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a category item")
async def delete_category_item(
    item_id: str,
    service: CategoryService = Depends(get_category_service),
) -> Response:
    return await service.delete_item(item_id)
