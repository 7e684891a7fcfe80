"""
Generic CRUD repository.

A CrudRepository is configured per entity (model, search fields, ordering,
organization scope) and composed into the entity repositories rather than
subclassed. It owns the rules every entity shares:

- search is a case-insensitive substring match OR-ed across the search fields
- update/delete check existence first and raise NotFoundError
- any SQLAlchemy failure rolls back the session and is re-raised as a
  domain error via translate_db_error
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, AsyncIterator, Callable, Generic, Mapping, Sequence, TypeVar

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.errors import NotFoundError, translate_db_error
from worksite.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)

SearchClause = Callable[[str], ColumnElement[bool]]


def like_pattern(term: str) -> str:
    """Wrap a search term for a substring LIKE, escaping wildcards."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class CrudRepository(Generic[ModelT]):
    """Create/read/list/update/delete for one model, optionally org-scoped."""

    def __init__(
        self,
        session: AsyncSession,
        model: type[ModelT],
        *,
        resource: str,
        search_fields: Sequence[Any] = (),
        search_clauses: Sequence[SearchClause] = (),
        order_by: Sequence[Any] = (),
        organization_id: str | None = None,
    ) -> None:
        self.session = session
        self.model = model
        self.resource = resource
        self.search_fields = tuple(search_fields)
        self.search_clauses = tuple(search_clauses)
        self.order_by = tuple(order_by) or (model.created_at.desc(),)  # type: ignore[attr-defined]
        self.organization_id = organization_id

    # -----------------------------------------------------------------------
    # Query composition
    # -----------------------------------------------------------------------

    def scoped(self, stmt: Select[Any]) -> Select[Any]:
        """Restrict a statement to the repository's organization, if any."""
        if self.organization_id is None:
            return stmt
        return stmt.where(self.model.organization_id == self.organization_id)  # type: ignore[attr-defined]

    def base_query(self) -> Select[Any]:
        return self.scoped(select(self.model))

    def search_filter(self, search: str | None) -> ColumnElement[bool] | None:
        if not search:
            return None
        pattern = like_pattern(search)
        clauses = [field.ilike(pattern, escape="\\") for field in self.search_fields]
        clauses.extend(build(pattern) for build in self.search_clauses)
        if not clauses:
            return None
        return or_(*clauses)

    def filtered(
        self,
        stmt: Select[Any],
        *,
        search: str | None = None,
        filters: Mapping[str, Any] | None = None,
        conditions: Sequence[ColumnElement[bool]] = (),
    ) -> Select[Any]:
        """Apply search, equality filters (None values skipped) and raw conditions."""
        clause = self.search_filter(search)
        if clause is not None:
            stmt = stmt.where(clause)
        for name, value in (filters or {}).items():
            if value is not None:
                stmt = stmt.where(getattr(self.model, name) == value)
        for condition in conditions:
            stmt = stmt.where(condition)
        return stmt

    @asynccontextmanager
    async def guard(self) -> AsyncIterator[None]:
        """Roll back and translate store errors raised inside the block."""
        try:
            yield
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise translate_db_error(exc, self.resource) from exc

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    async def find_by_id(self, id: str) -> ModelT | None:
        async with self.guard():
            result = await self.session.execute(
                self.base_query().where(self.model.id == id)  # type: ignore[attr-defined]
            )
            return result.scalar_one_or_none()

    async def find_by(self, **criteria: Any) -> ModelT | None:
        """Look up a single row by a unique key (e.g. phone=...)."""
        stmt = self.base_query()
        for name, value in criteria.items():
            stmt = stmt.where(getattr(self.model, name) == value)
        async with self.guard():
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def get(self, id: str) -> ModelT:
        entity = await self.find_by_id(id)
        if entity is None:
            raise NotFoundError.for_resource(self.resource)
        return entity

    async def exists(self, id: str) -> bool:
        stmt = self.scoped(
            select(func.count()).select_from(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        async with self.guard():
            count = (await self.session.execute(stmt)).scalar_one()
        return count > 0

    async def count(self, stmt: Select[Any]) -> int:
        async with self.guard():
            result = await self.session.execute(
                select(func.count()).select_from(stmt.order_by(None).subquery())
            )
            return result.scalar_one()

    async def find_all(
        self,
        *,
        skip: int = 0,
        take: int | None = None,
        search: str | None = None,
        filters: Mapping[str, Any] | None = None,
        conditions: Sequence[ColumnElement[bool]] = (),
        stmt: Select[Any] | None = None,
    ) -> tuple[list[ModelT], int]:
        """Return one page of rows and the total matching count."""
        stmt = self.filtered(
            stmt if stmt is not None else self.base_query(),
            search=search,
            filters=filters,
            conditions=conditions,
        )
        total = await self.count(stmt)

        stmt = stmt.order_by(*self.order_by).offset(skip)
        if take is not None:
            stmt = stmt.limit(take)
        async with self.guard():
            result = await self.session.execute(stmt)
            items = list(result.scalars().unique().all())
        return items, total

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    async def create(self, data: Mapping[str, Any]) -> ModelT:
        values = dict(data)
        if self.organization_id is not None:
            values["organization_id"] = self.organization_id
        entity = self.model(**values)
        async with self.guard():
            self.session.add(entity)
            await self.session.flush()
        return entity

    async def update(self, id: str, data: Mapping[str, Any]) -> ModelT:
        """Apply a partial update; keys absent from `data` are left untouched."""
        entity = await self.get(id)
        async with self.guard():
            for name, value in data.items():
                setattr(entity, name, value)
            await self.session.flush()
        return entity

    async def delete(self, id: str) -> None:
        entity = await self.get(id)
        async with self.guard():
            await self.session.delete(entity)
            await self.session.flush()


# ---------------------------------------------------------------------------
# Helpers shared by entity repositories
# ---------------------------------------------------------------------------

def to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_float(value: Any) -> float:
    """Aggregates come back as Decimal, float, int or None depending on the store."""
    return float(value or 0)


async def ensure_in_organization(
    session: AsyncSession,
    model: type[Base],
    id: str,
    organization_id: str,
    resource: str,
) -> None:
    """Raise NotFoundError unless `id` is a row of `model` owned by the organization."""
    stmt = (
        select(func.count())
        .select_from(model)
        .where(model.id == id, model.organization_id == organization_id)  # type: ignore[attr-defined]
    )
    try:
        count = (await session.execute(stmt)).scalar_one()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise translate_db_error(exc, resource) from exc
    if count == 0:
        raise NotFoundError.for_resource(resource)


def with_decimals(data: Mapping[str, Any], *names: str) -> dict[str, Any]:
    """Copy `data` with the named numeric fields converted to Decimal."""
    values = dict(data)
    for name in names:
        if name in values:
            values[name] = to_decimal(values[name])
    return values
