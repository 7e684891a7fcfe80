"""
Per-entity query helpers.

Reads go through the QueryClient cache under the entity's keys. Mutations
call the API and then invalidate what INVALIDATION_TABLE lists for them;
the invalidation refetches run in the background.
"""

from __future__ import annotations

from typing import Any, Mapping

from worksite.client import keys as query_keys
from worksite.client.api import ApiClient
from worksite.client.invalidation import apply_invalidation
from worksite.client.keys import EntityKeys
from worksite.client.query_client import QueryClient

Params = Mapping[str, Any]


class EntityQueries:
    entity: str = ""
    path: str = ""
    keys: EntityKeys

    def __init__(self, api: ApiClient, client: QueryClient) -> None:
        self.api = api
        self.client = client

    def _invalidate(self, mutation: str, variables: Params, result: Any) -> None:
        apply_invalidation(self.client, self.entity, mutation, variables, result)

    async def list(self, params: Params | None = None) -> Any:
        return await self.client.fetch_query(
            self.keys.list(params),
            lambda: self.api.get(self.path, params),
        )

    async def get(self, id: str) -> Any:
        return await self.client.fetch_query(
            self.keys.detail(id),
            lambda: self.api.get(f"{self.path}/{id}"),
        )

    async def create(self, data: Params) -> Any:
        result = await self.api.post(self.path, dict(data))
        self._invalidate("create", {}, result)
        return result

    async def update(self, id: str, data: Params) -> Any:
        result = await self.api.put(f"{self.path}/{id}", dict(data))
        self._invalidate("update", {"id": id}, result)
        return result

    async def delete(self, id: str, **variables: Any) -> None:
        await self.api.delete(f"{self.path}/{id}")
        self._invalidate("delete", {"id": id, **variables}, None)


class UserQueries(EntityQueries):
    entity = "user"
    path = "/api/users"
    keys = query_keys.users

    async def by_phone(self, phone: str) -> Any:
        return await self.client.fetch_query(
            self.keys.by_phone(phone),
            lambda: self.api.get(f"{self.path}/by-phone", {"phone": phone}),
        )

    async def organizations(self, user_id: str) -> Any:
        return await self.client.fetch_query(
            self.keys.organizations(user_id),
            lambda: self.api.get(f"{self.path}/{user_id}/organizations"),
        )


class OrganizationQueries(EntityQueries):
    entity = "organization"
    path = "/api/organizations"
    keys = query_keys.organizations

    async def list(self, params: Params | None = None) -> Any:
        """Organizations the signed-in user belongs to."""
        user_id = self.api.user_id
        return await self.client.fetch_query(
            query_keys.users.organizations(user_id),
            lambda: self.api.get(f"/api/users/{user_id}/organizations"),
        )

    async def create(self, data: Params) -> Any:
        result = await self.api.post(self.path, dict(data))
        self._invalidate("create", {"user_id": self.api.user_id}, result)
        return result

    async def members(self, organization_id: str, params: Params | None = None) -> Any:
        return await self.client.fetch_query(
            self.keys.members(organization_id, params),
            lambda: self.api.get(f"{self.path}/{organization_id}/members", params),
        )


class RoleQueries(EntityQueries):
    entity = "role"
    path = "/api/roles"
    keys = query_keys.roles


class TeamQueries(EntityQueries):
    entity = "team"
    path = "/api/team"
    keys = query_keys.team


class ProjectQueries(EntityQueries):
    entity = "project"
    path = "/api/projects"
    keys = query_keys.projects

    async def stats(self, project_id: str) -> Any:
        return await self.client.fetch_query(
            self.keys.stats(project_id),
            lambda: self.api.get(f"{self.path}/{project_id}/stats"),
        )


class StageQueries(EntityQueries):
    entity = "stage"
    path = "/api/stages"
    keys = query_keys.stages

    async def by_project(self, project_id: str) -> Any:
        return await self.client.fetch_query(
            self.keys.by_project(project_id),
            lambda: self.api.get(f"{self.path}/project/{project_id}"),
        )

    async def stats(self, stage_id: str) -> Any:
        return await self.client.fetch_query(
            self.keys.stats(stage_id),
            lambda: self.api.get(f"{self.path}/{stage_id}/stats"),
        )

    async def delete(self, id: str, **variables: Any) -> None:
        if "project_id" not in variables:
            cached = self.client.get_query_data(self.keys.detail(id))
            if cached:
                variables["project_id"] = cached.get("projectId")
        await super().delete(id, **variables)


class TaskQueries(EntityQueries):
    entity = "task"
    path = "/api/tasks"
    keys = query_keys.tasks

    def _cached_stage_id(self, task_id: str) -> str | None:
        cached = self.client.get_query_data(self.keys.detail(task_id))
        return cached.get("stageId") if cached else None

    async def by_stage(self, stage_id: str) -> Any:
        return await self.client.fetch_query(
            self.keys.by_stage(stage_id),
            lambda: self.api.get(f"{self.path}/stage/{stage_id}"),
        )

    async def by_project(self, project_id: str) -> Any:
        return await self.client.fetch_query(
            self.keys.by_project(project_id),
            lambda: self.api.get(f"{self.path}/project/{project_id}"),
        )

    async def update(self, id: str, data: Params, previous_stage_id: str | None = None) -> Any:
        """Update a task; when it moves stage, both stages' aggregates are invalidated."""
        previous_stage_id = previous_stage_id or self._cached_stage_id(id)
        result = await self.api.put(f"{self.path}/{id}", dict(data))
        self._invalidate("update", {"id": id, "previous_stage_id": previous_stage_id}, result)
        return result

    async def update_status(self, id: str, status: str) -> Any:
        result = await self.api.put(f"{self.path}/{id}/status", {"status": status})
        self._invalidate("update_status", {"id": id}, result)
        return result

    async def delete(self, id: str, **variables: Any) -> None:
        if "stage_id" not in variables:
            variables["stage_id"] = self._cached_stage_id(id)
        await super().delete(id, **variables)


class PartyQueries(EntityQueries):
    entity = "party"
    path = "/api/parties"
    keys = query_keys.parties

    async def summary(self) -> Any:
        return await self.client.fetch_query(
            self.keys.summary(),
            lambda: self.api.get(f"{self.path}/summary"),
        )

    async def stats(self, party_id: str) -> Any:
        return await self.client.fetch_query(
            self.keys.stats(party_id),
            lambda: self.api.get(f"{self.path}/{party_id}/stats"),
        )

    async def transactions(self, party_id: str, params: Params | None = None) -> Any:
        return await self.client.fetch_query(
            self.keys.transactions(party_id, params),
            lambda: self.api.get(f"{self.path}/{party_id}/transactions", params),
        )

    async def projects(self, party_id: str, params: Params | None = None) -> Any:
        return await self.client.fetch_query(
            self.keys.projects(party_id, params),
            lambda: self.api.get(f"{self.path}/{party_id}/projects", params),
        )


class _MoneyQueries(EntityQueries):
    """Expenses and payments carry their owning project, stage and party from the cache."""

    _OWNERS = (("project_id", "projectId"), ("party_id", "partyId"), ("stage_id", "stageId"))

    def _cached_owners(self, id: str) -> dict[str, Any]:
        cached = self.client.get_query_data(self.keys.detail(id)) or {}
        return {name: cached.get(camel) for name, camel in self._OWNERS}

    async def update(self, id: str, data: Params, **previous: Any) -> Any:
        """Update a record; the project, stage and party it leaves are invalidated too.

        Pass `previous_project_id`, `previous_stage_id` or `previous_party_id`
        when the record is not cached.
        """
        for name, value in self._cached_owners(id).items():
            previous.setdefault(f"previous_{name}", value)
        result = await self.api.put(f"{self.path}/{id}", dict(data))
        self._invalidate("update", {"id": id, **previous}, result)
        return result

    async def delete(self, id: str, **variables: Any) -> None:
        for name, value in self._cached_owners(id).items():
            variables.setdefault(name, value)
        await super().delete(id, **variables)


class ExpenseQueries(_MoneyQueries):
    entity = "expense"
    path = "/api/expenses"
    keys = query_keys.expenses

    async def summary(self, project_id: str | None = None) -> Any:
        return await self.client.fetch_query(
            self.keys.summary(project_id),
            lambda: self.api.get(f"{self.path}/summary/by-category", {"projectId": project_id}),
        )


class PaymentQueries(_MoneyQueries):
    entity = "payment"
    path = "/api/payments"
    keys = query_keys.payments

    async def summary(self, params: Params | None = None) -> Any:
        return await self.client.fetch_query(
            self.keys.summary(params),
            lambda: self.api.get(f"{self.path}/summary", params),
        )


class CategoryQueries(EntityQueries):
    """Category types are read here; get/create/update/delete act on items."""

    entity = "category"
    path = "/api/categories/items"
    keys = query_keys.categories

    async def list(self, params: Params | None = None) -> Any:
        return await self.client.fetch_query(
            self.keys.list(params),
            lambda: self.api.get("/api/categories/types", params),
        )

    async def by_type(self, type_key: str) -> Any:
        return await self.client.fetch_query(
            self.keys.by_type(type_key),
            lambda: self.api.get(f"{self.path}/type/{type_key}"),
        )


class Queries:
    """All entity helpers bound to one API client and one cache."""

    def __init__(self, api: ApiClient, client: QueryClient | None = None) -> None:
        self.client = client or QueryClient()
        self.users = UserQueries(api, self.client)
        self.organizations = OrganizationQueries(api, self.client)
        self.roles = RoleQueries(api, self.client)
        self.team = TeamQueries(api, self.client)
        self.projects = ProjectQueries(api, self.client)
        self.stages = StageQueries(api, self.client)
        self.tasks = TaskQueries(api, self.client)
        self.parties = PartyQueries(api, self.client)
        self.expenses = ExpenseQueries(api, self.client)
        self.payments = PaymentQueries(api, self.client)
        self.categories = CategoryQueries(api, self.client)
