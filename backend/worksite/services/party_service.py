"""
Party business logic.

Parties carry a derived balance; the ledger (transactions) merges their
expenses and payments.
"""

from __future__ import annotations

from typing import Literal

from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.dependencies import OrgContext, PageParams
from worksite.core.error_handler import error_handler
from worksite.core.responses import (
    build_pagination,
    send_created,
    send_no_content,
    send_not_found,
    send_paginated,
    send_success,
)
from worksite.models.party import PartyType
from worksite.repositories.party import PartyRepository
from worksite.schemas.party import (
    PartyCreateRequest,
    PartyProjectCredit,
    PartyProjectTotals,
    PartyResponse,
    PartyStatsResponse,
    PartySummaryResponse,
    PartyUpdateRequest,
    PartyWithBalanceResponse,
    TransactionResponse,
)

handle = error_handler("party")


class PartyService:
    def __init__(self, db: AsyncSession, ctx: OrgContext) -> None:
        self.db = db
        self.parties = PartyRepository(db, ctx.organization_id)

    @handle("fetch")
    async def list_parties(
        self,
        page: PageParams,
        search: str | None = None,
        type: PartyType | None = None,
    ) -> Response:
        parties, total = await self.parties.find_all(
            skip=page.skip, take=page.limit, search=search, type=type
        )
        balances = await self.parties.balances([p.id for p in parties])
        return send_paginated(
            [
                PartyWithBalanceResponse.model_validate(p).model_copy(
                    update={"balance": balances.get(p.id, 0.0)}
                )
                for p in parties
            ],
            build_pagination(page.page, page.limit, total),
        )

    @handle("fetch")
    async def get_summary(self) -> Response:
        summary = await self.parties.get_summary()
        return send_success(PartySummaryResponse.model_validate(summary))

    @handle("fetch")
    async def get_party(self, party_id: str) -> Response:
        party = await self.parties.find_by_id(party_id)
        if party is None:
            return send_not_found("Party")
        return send_success(PartyResponse.model_validate(party))

    @handle("fetch")
    async def get_party_stats(self, party_id: str) -> Response:
        if await self.parties.find_by_id(party_id) is None:
            return send_not_found("Party")
        stats = await self.parties.get_party_stats(party_id)
        return send_success(PartyStatsResponse.model_validate(stats))

    @handle("fetch")
    async def get_party_projects(self, party_id: str, page: PageParams) -> Response:
        if await self.parties.find_by_id(party_id) is None:
            return send_not_found("Party")
        result = await self.parties.get_party_projects(party_id, skip=page.skip, take=page.limit)
        return send_success({
            "items": [PartyProjectCredit.model_validate(p) for p in result["projects"]],
            "totals": PartyProjectTotals.model_validate(result["totals"]),
            "pagination": build_pagination(page.page, page.limit, result["total"]),
        })

    @handle("fetch")
    async def get_party_transactions(
        self,
        party_id: str,
        page: PageParams,
        type: Literal["expense", "payment"] | None = None,
        project_id: str | None = None,
    ) -> Response:
        if await self.parties.find_by_id(party_id) is None:
            return send_not_found("Party")
        transactions, total = await self.parties.get_party_transactions(
            party_id, type=type, project_id=project_id, skip=page.skip, take=page.limit
        )
        return send_paginated(
            [TransactionResponse.model_validate(t) for t in transactions],
            build_pagination(page.page, page.limit, total),
        )

    @handle("create")
    async def create_party(self, body: PartyCreateRequest) -> Response:
        party = await self.parties.create(body.model_dump())
        return send_created(PartyResponse.model_validate(party))

    @handle("update")
    async def update_party(self, party_id: str, body: PartyUpdateRequest) -> Response:
        party = await self.parties.update(party_id, body.model_dump(exclude_unset=True))
        return send_success(PartyResponse.model_validate(party))

    @handle("delete")
    async def delete_party(self, party_id: str) -> Response:
        await self.parties.delete(party_id)
        return send_no_content()
