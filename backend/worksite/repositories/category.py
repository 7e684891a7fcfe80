"""
Category repository.

Types are read-only per organization; items are managed by the
organization. Locked (seeded) items can be neither renamed nor deleted.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.errors import NotFoundError, ValidationFailedError
from worksite.models.category import DEFAULT_CATEGORY_TYPES, CategoryItem, CategoryType
from worksite.repositories.base import CrudRepository


async def seed_default_categories(session: AsyncSession, organization_id: str) -> None:
    """Create the default category types, and their locked items, for a new organization."""
    for key, (label, names) in DEFAULT_CATEGORY_TYPES.items():
        category_type = CategoryType(organization_id=organization_id, key=key, label=label)
        session.add(category_type)
        await session.flush()
        session.add_all(
            CategoryItem(
                organization_id=organization_id,
                category_type_id=category_type.id,
                name=name,
                is_editable=False,
            )
            for name in names
        )
    await session.flush()


class CategoryRepository:
    def __init__(self, session: AsyncSession, organization_id: str) -> None:
        self.session = session
        self.organization_id = organization_id
        self.types: CrudRepository[CategoryType] = CrudRepository(
            session,
            CategoryType,
            resource="Category type",
            order_by=(CategoryType.label.asc(),),
            organization_id=organization_id,
        )
        self.items: CrudRepository[CategoryItem] = CrudRepository(
            session,
            CategoryItem,
            resource="Category item",
            order_by=(CategoryItem.name.asc(),),
            organization_id=organization_id,
        )

    # -----------------------------------------------------------------------
    # Types
    # -----------------------------------------------------------------------

    async def find_types(self) -> list[CategoryType]:
        types, _ = await self.types.find_all()
        return types

    async def find_type_by_key(self, key: str) -> CategoryType | None:
        return await self.types.find_by(key=key)

    async def items_by_type(
        self, type_ids: list[str], include_inactive: bool = False
    ) -> dict[str, list[CategoryItem]]:
        if not type_ids:
            return {}
        stmt = self.items.base_query().where(CategoryItem.category_type_id.in_(type_ids))
        if not include_inactive:
            stmt = stmt.where(CategoryItem.is_active.is_(True))
        async with self.items.guard():
            rows = (await self.session.execute(stmt.order_by(CategoryItem.name))).scalars().all()
        grouped: dict[str, list[CategoryItem]] = {type_id: [] for type_id in type_ids}
        for item in rows:
            grouped[item.category_type_id].append(item)
        return grouped

    # -----------------------------------------------------------------------
    # Items
    # -----------------------------------------------------------------------

    async def find_item(self, id: str) -> CategoryItem | None:
        return await self.items.find_by_id(id)

    async def find_items_by_type_key(
        self, key: str, include_inactive: bool = False
    ) -> list[CategoryItem]:
        category_type = await self.find_type_by_key(key)
        if category_type is None:
            raise NotFoundError.for_resource("Category type")
        grouped = await self.items_by_type([category_type.id], include_inactive)
        return grouped[category_type.id]

    async def create_item(self, data: Mapping[str, Any]) -> CategoryItem:
        if not await self.types.exists(data["category_type_id"]):
            raise NotFoundError.for_resource("Category type")
        return await self.items.create({**data, "is_editable": True})

    async def update_item(self, id: str, data: Mapping[str, Any]) -> CategoryItem:
        item = await self.items.get(id)
        if not item.is_editable and "name" in data and data["name"] != item.name:
            raise ValidationFailedError(
                "Default category items cannot be renamed", code="CATEGORY_ITEM_LOCKED"
            )
        return await self.items.update(id, data)

    async def delete_item(self, id: str) -> None:
        item = await self.items.get(id)
        if not item.is_editable:
            raise ValidationFailedError(
                "Default category items cannot be deleted", code="CATEGORY_ITEM_LOCKED"
            )
        await self.items.delete(id)

    async def ensure_item_of_type(self, item_id: str, key: str, field: str) -> None:
        """Raise unless `item_id` is an item of this organization under the `key` type."""
        stmt = (
            select(CategoryType.key)
            .join(CategoryItem, CategoryItem.category_type_id == CategoryType.id)
            .where(CategoryItem.id == item_id, CategoryItem.organization_id == self.organization_id)
        )
        async with self.items.guard():
            found = (await self.session.execute(stmt)).scalar_one_or_none()
        if found is None:
            raise NotFoundError.for_resource("Category item")
        if found != key:
            raise ValidationFailedError(
                f"{field} must reference a {key} category item",
                details=[{"field": field, "message": f"Expected an item of type {key}"}],
            )
