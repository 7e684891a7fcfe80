"""
Which cached queries each mutation makes stale.

INVALIDATION_TABLE maps (entity, mutation) to target builders. A builder
receives the mutation's variables and its result (the `data` of the
response, None for deletes) and returns a key prefix, or None when the
information it needs is absent.

Variables use snake_case names: `id`, `project_id`, `stage_id`,
`previous_stage_id`, `party_id`, `user_id`. Updates of expenses and payments
also carry `previous_project_id`, `previous_stage_id` and `previous_party_id`.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from worksite.client import keys
from worksite.client.keys import QueryKey
from worksite.client.query_client import QueryClient

Variables = Mapping[str, Any]
TargetBuilder = Callable[[Variables, Any], QueryKey | None]


def _field(variables: Variables, result: Any, name: str, camel: str) -> Any:
    """Look a value up in the variables first, then in the response data."""
    value = variables.get(name)
    if value is None and isinstance(result, Mapping):
        value = result.get(camel)
    return value


def _fixed(key_fn: Callable[[], QueryKey]) -> TargetBuilder:
    return lambda variables, result: key_fn()


def _by(name: str, camel: str, key_fn: Callable[[Any], QueryKey]) -> TargetBuilder:
    def build(variables: Variables, result: Any) -> QueryKey | None:
        value = _field(variables, result, name, camel)
        return key_fn(value) if value is not None else None
    return build


def _by_variable(name: str, key_fn: Callable[[Any], QueryKey]) -> TargetBuilder:
    def build(variables: Variables, result: Any) -> QueryKey | None:
        value = variables.get(name)
        return key_fn(value) if value is not None else None
    return build


_ID = ("id", "id")
_STAGE = ("stage_id", "stageId")
_PROJECT = ("project_id", "projectId")
_PARTY = ("party_id", "partyId")


def _stage_targets(name: str, camel: str) -> tuple[TargetBuilder, ...]:
    """Task aggregates a stage exposes: its task list, stats and detail."""
    return (
        _by(name, camel, keys.tasks.by_stage),
        _by(name, camel, keys.stages.stats),
        _by(name, camel, keys.stages.detail),
    )


def _previous_stage_targets() -> tuple[TargetBuilder, ...]:
    return (
        _by_variable("previous_stage_id", keys.tasks.by_stage),
        _by_variable("previous_stage_id", keys.stages.stats),
        _by_variable("previous_stage_id", keys.stages.detail),
    )


def _money_targets() -> tuple[TargetBuilder, ...]:
    """Aggregates that include expense and payment amounts."""
    return (
        _by(*_PROJECT, keys.projects.stats),
        _by(*_STAGE, keys.stages.stats),
        _by(*_PARTY, keys.parties.stats),
        _by(*_PARTY, keys.parties.transactions),
        _by(*_PARTY, keys.parties.projects),
        _fixed(keys.parties.lists),
        _fixed(keys.parties.summary),
    )


def _previous_money_targets() -> tuple[TargetBuilder, ...]:
    """Aggregates of the project, stage and party an updated record moved away from."""
    return (
        _by_variable("previous_project_id", keys.projects.stats),
        _by_variable("previous_stage_id", keys.stages.stats),
        _by_variable("previous_party_id", keys.parties.stats),
        _by_variable("previous_party_id", keys.parties.transactions),
        _by_variable("previous_party_id", keys.parties.projects),
    )


INVALIDATION_TABLE: dict[tuple[str, str], tuple[TargetBuilder, ...]] = {
    # Users
    ("user", "create"): (_fixed(keys.users.lists),),
    ("user", "update"): (_fixed(keys.users.lists), _by(*_ID, keys.users.detail)),
    ("user", "delete"): (_fixed(keys.users.lists), _by(*_ID, keys.users.detail)),
    # Organizations
    ("organization", "create"): (_by_variable("user_id", keys.users.organizations),),
    ("organization", "update"): (
        _by(*_ID, keys.organizations.detail),
        _fixed(keys.users.organizations),
    ),
    ("organization", "delete"): (
        _fixed(lambda: keys.organizations.all),
        _fixed(keys.users.organizations),
    ),
    # Roles
    ("role", "create"): (_fixed(lambda: keys.roles.all),),
    ("role", "update"): (_by(*_ID, keys.roles.detail), _fixed(keys.roles.lists)),
    ("role", "delete"): (_fixed(lambda: keys.roles.all),),
    # Team (membership changes move role member counts)
    ("team", "create"): (_fixed(lambda: keys.team.all), _fixed(keys.roles.lists)),
    ("team", "update"): (
        _by(*_ID, keys.team.detail),
        _fixed(keys.team.lists),
        _fixed(keys.roles.lists),
    ),
    ("team", "delete"): (_fixed(lambda: keys.team.all), _fixed(keys.roles.lists)),
    # Projects
    ("project", "create"): (_fixed(keys.projects.lists),),
    ("project", "update"): (_fixed(keys.projects.lists), _by(*_ID, keys.projects.detail)),
    ("project", "delete"): (_fixed(keys.projects.lists), _by(*_ID, keys.projects.detail)),
    # Stages
    ("stage", "create"): (_fixed(keys.stages.lists), _by(*_PROJECT, keys.stages.by_project)),
    ("stage", "update"): (
        _fixed(keys.stages.lists),
        _by(*_ID, keys.stages.detail),
        _by(*_PROJECT, keys.stages.by_project),
        _by(*_ID, keys.stages.stats),
    ),
    ("stage", "delete"): (
        _fixed(keys.stages.lists),
        _by(*_ID, keys.stages.detail),
        _by(*_PROJECT, keys.stages.by_project),
        _by(*_ID, keys.tasks.by_stage),
    ),
    # Tasks: both the old and the new stage aggregates change on a move
    ("task", "create"): (_fixed(keys.tasks.lists), _by(*_PROJECT, keys.tasks.by_project), *_stage_targets(*_STAGE)),
    ("task", "update"): (
        _fixed(keys.tasks.lists),
        _by(*_ID, keys.tasks.detail),
        _fixed(keys.tasks.by_project),
        *_stage_targets(*_STAGE),
        *_previous_stage_targets(),
    ),
    ("task", "update_status"): (
        _fixed(keys.tasks.lists),
        _by(*_ID, keys.tasks.detail),
        _fixed(keys.tasks.by_project),
        *_stage_targets(*_STAGE),
    ),
    ("task", "delete"): (
        _fixed(keys.tasks.lists),
        _by(*_ID, keys.tasks.detail),
        _fixed(keys.tasks.by_project),
        *_stage_targets(*_STAGE),
    ),
    # Parties
    ("party", "create"): (_fixed(lambda: keys.parties.all),),
    ("party", "update"): (
        _by(*_ID, keys.parties.detail),
        _fixed(keys.parties.lists),
        _fixed(keys.parties.summary),
    ),
    ("party", "delete"): (_fixed(lambda: keys.parties.all),),
    # Expenses
    ("expense", "create"): (
        _fixed(keys.expenses.lists),
        _fixed(keys.expenses.summary),
        *_money_targets(),
    ),
    ("expense", "update"): (
        _fixed(keys.expenses.lists),
        _by(*_ID, keys.expenses.detail),
        _fixed(keys.expenses.summary),
        *_money_targets(),
        *_previous_money_targets(),
    ),
    ("expense", "delete"): (
        _fixed(keys.expenses.lists),
        _by(*_ID, keys.expenses.detail),
        _fixed(keys.expenses.summary),
        *_money_targets(),
    ),
    # Payments
    ("payment", "create"): (_fixed(lambda: keys.payments.all), *_money_targets()),
    ("payment", "update"): (
        _fixed(lambda: keys.payments.all),
        *_money_targets(),
        *_previous_money_targets(),
    ),
    ("payment", "delete"): (_fixed(lambda: keys.payments.all), *_money_targets()),
    # Categories: item names label expense summaries and party ledgers
    ("category", "create"): (_fixed(lambda: keys.categories.all),),
    ("category", "update"): (
        _fixed(lambda: keys.categories.all),
        _fixed(keys.expenses.summary),
        _fixed(keys.parties.transactions),
    ),
    ("category", "delete"): (
        _fixed(lambda: keys.categories.all),
        _fixed(keys.expenses.lists),
        _fixed(keys.expenses.details),
    ),
}


def invalidation_targets(
    entity: str,
    mutation: str,
    variables: Variables | None = None,
    result: Any = None,
) -> list[QueryKey]:
    """Resolve the key prefixes a mutation invalidates, in table order without duplicates."""
    try:
        builders = INVALIDATION_TABLE[(entity, mutation)]
    except KeyError:
        raise KeyError(f"No invalidation rule for {entity}.{mutation}") from None

    targets: list[QueryKey] = []
    for build in builders:
        key = build(variables or {}, result)
        if key is not None and key not in targets:
            targets.append(key)
    return targets


def apply_invalidation(
    client: QueryClient,
    entity: str,
    mutation: str,
    variables: Variables | None = None,
    result: Any = None,
) -> list[QueryKey]:
    targets = invalidation_targets(entity, mutation, variables, result)
    for prefix in targets:
        client.invalidate(prefix)
    return targets
