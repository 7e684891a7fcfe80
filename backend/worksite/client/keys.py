"""
Structured cache keys.

Keys are tuples: entity name, operation, then parameters. Every key built by
a factory starts with the keys of its broader factories, so invalidating
`tasks.lists()` also invalidates every `tasks.list(params)`.
"""

from __future__ import annotations

from typing import Any, Mapping

QueryKey = tuple[Any, ...]


def freeze_params(params: Mapping[str, Any] | None) -> tuple[tuple[str, Any], ...]:
    """Hashable, order-independent form of query parameters. None values are dropped."""
    if not params:
        return ()
    return tuple(sorted((k, v) for k, v in params.items() if v is not None))


def _scoped(prefix: QueryKey, *parts: Any) -> QueryKey:
    """Append parts up to the first None, so a missing id yields the broader prefix."""
    key = prefix
    for part in parts:
        if part is None:
            break
        key = (*key, part)
    return key


class EntityKeys:
    def __init__(self, name: str) -> None:
        self.name = name
        self.all: QueryKey = (name,)

    def lists(self) -> QueryKey:
        return (*self.all, "list")

    def list(self, params: Mapping[str, Any] | None = None) -> QueryKey:
        return (*self.lists(), freeze_params(params))

    def details(self) -> QueryKey:
        return (*self.all, "detail")

    def detail(self, id: str) -> QueryKey:
        return (*self.details(), id)

    def stats(self, id: str | None = None) -> QueryKey:
        return _scoped((*self.all, "stats"), id)


class UserKeys(EntityKeys):
    def by_phone(self, phone: str) -> QueryKey:
        return (*self.all, "phone", phone)

    def organizations(self, user_id: str | None = None) -> QueryKey:
        return _scoped((*self.all, "organizations"), user_id)


class OrganizationKeys(EntityKeys):
    def members(self, organization_id: str | None = None, params: Mapping[str, Any] | None = None) -> QueryKey:
        key = _scoped((*self.all, "members"), organization_id)
        if organization_id is None:
            return key
        return (*key, freeze_params(params))


class StageKeys(EntityKeys):
    def by_project(self, project_id: str | None = None) -> QueryKey:
        return _scoped((*self.all, "project"), project_id)


class TaskKeys(EntityKeys):
    def by_stage(self, stage_id: str | None = None) -> QueryKey:
        return _scoped((*self.all, "stage"), stage_id)

    def by_project(self, project_id: str | None = None) -> QueryKey:
        return _scoped((*self.all, "project"), project_id)


class PartyKeys(EntityKeys):
    def summary(self) -> QueryKey:
        return (*self.all, "summary")

    def transactions(self, party_id: str | None = None, params: Mapping[str, Any] | None = None) -> QueryKey:
        key = _scoped((*self.all, "transactions"), party_id)
        if party_id is None:
            return key
        return (*key, freeze_params(params))

    def projects(self, party_id: str | None = None, params: Mapping[str, Any] | None = None) -> QueryKey:
        key = _scoped((*self.all, "projects"), party_id)
        if party_id is None:
            return key
        return (*key, freeze_params(params))


class ExpenseKeys(EntityKeys):
    def summary(self, project_id: str | None = None) -> QueryKey:
        return _scoped((*self.all, "summary"), project_id)


class CategoryKeys(EntityKeys):
    def by_type(self, type_key: str | None = None) -> QueryKey:
        return _scoped((*self.all, "type"), type_key)


class PaymentKeys(EntityKeys):
    def summary(self, params: Mapping[str, Any] | None = None) -> QueryKey:
        frozen = freeze_params(params)
        return (*self.all, "summary", frozen) if frozen else (*self.all, "summary")


users = UserKeys("users")
organizations = OrganizationKeys("organizations")
roles = EntityKeys("roles")
team = EntityKeys("team")
projects = EntityKeys("projects")
stages = StageKeys("stages")
tasks = TaskKeys("tasks")
parties = PartyKeys("parties")
expenses = ExpenseKeys("expenses")
payments = PaymentKeys("payments")
categories = CategoryKeys("categories")


def starts_with(key: QueryKey, prefix: QueryKey) -> bool:
    return key[: len(prefix)] == prefix
