"""
Category business logic.
"""

from __future__ import annotations

from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.dependencies import OrgContext
from worksite.core.error_handler import error_handler
from worksite.core.responses import send_created, send_no_content, send_not_found, send_success
from worksite.models.category import CategoryItem, CategoryType
from worksite.repositories.category import CategoryRepository
from worksite.schemas.category import (
    CategoryItemCreateRequest,
    CategoryItemResponse,
    CategoryItemUpdateRequest,
    CategoryTypeResponse,
)

handle = error_handler("category")


def _type_response(category_type: CategoryType, items: list[CategoryItem]) -> CategoryTypeResponse:
    return CategoryTypeResponse(
        id=category_type.id,
        key=category_type.key,
        label=category_type.label,
        items=[CategoryItemResponse.model_validate(i) for i in items],
    )


class CategoryService:
    """Category types with their items, and item management. Scoped to the caller's organization."""

    def __init__(self, db: AsyncSession, ctx: OrgContext) -> None:
        self.db = db
        self.categories = CategoryRepository(db, ctx.organization_id)

    @handle("fetch")
    async def list_types(self, include_inactive: bool = False) -> Response:
        types = await self.categories.find_types()
        items = await self.categories.items_by_type([t.id for t in types], include_inactive)
        return send_success([_type_response(t, items[t.id]) for t in types])

    @handle("fetch")
    async def get_type_by_key(self, key: str) -> Response:
        category_type = await self.categories.find_type_by_key(key)
        if category_type is None:
            return send_not_found("Category type")
        items = await self.categories.items_by_type([category_type.id])
        return send_success(_type_response(category_type, items[category_type.id]))

    @handle("fetch")
    async def list_items_by_type_key(self, key: str, include_inactive: bool = False) -> Response:
        items = await self.categories.find_items_by_type_key(key, include_inactive)
        return send_success([CategoryItemResponse.model_validate(i) for i in items])

    @handle("fetch")
    async def get_item(self, item_id: str) -> Response:
        item = await self.categories.find_item(item_id)
        if item is None:
            return send_not_found("Category item")
        return send_success(CategoryItemResponse.model_validate(item))

    @handle("create")
    async def create_item(self, body: CategoryItemCreateRequest) -> Response:
        item = await self.categories.create_item(body.model_dump())
        return send_created(CategoryItemResponse.model_validate(item))

    @handle("update")
    async def update_item(self, item_id: str, body: CategoryItemUpdateRequest) -> Response:
        item = await self.categories.update_item(item_id, body.model_dump(exclude_unset=True))
        return send_success(CategoryItemResponse.model_validate(item))

    @handle("delete")
    async def delete_item(self, item_id: str) -> Response:
        await self.categories.delete_item(item_id)
        return send_no_content()
