"""
Payment business logic.
"""

from __future__ import annotations

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
from worksite.models.payment import PaymentType
from worksite.repositories.base import with_decimals
from worksite.repositories.payment import PaymentRepository
from worksite.schemas.payment import (
    PaymentCreateRequest,
    PaymentResponse,
    PaymentSummaryResponse,
    PaymentUpdateRequest,
)

handle = error_handler("payment")


class PaymentService:
    def __init__(self, db: AsyncSession, ctx: OrgContext) -> None:
        self.db = db
        self.payments = PaymentRepository(db, ctx.organization_id)

    @handle("fetch")
    async def list_payments(
        self,
        page: PageParams,
        search: str | None = None,
        project_id: str | None = None,
        party_id: str | None = None,
        type: PaymentType | None = None,
    ) -> Response:
        payments, total = await self.payments.find_all(
            skip=page.skip,
            take=page.limit,
            search=search,
            project_id=project_id,
            party_id=party_id,
            type=type,
        )
        return send_paginated(
            [PaymentResponse.model_validate(p) for p in payments],
            build_pagination(page.page, page.limit, total),
        )

    @handle("fetch")
    async def get_summary(
        self, project_id: str | None = None, type: PaymentType | None = None,
    ) -> Response:
        summary = await self.payments.get_payments_summary(project_id=project_id, type=type)
        return send_success(PaymentSummaryResponse.model_validate(summary))

    @handle("fetch")
    async def get_payment(self, payment_id: str) -> Response:
        payment = await self.payments.find_by_id(payment_id)
        if payment is None:
            return send_not_found("Payment")
        return send_success(PaymentResponse.model_validate(payment))

    @handle("create")
    async def create_payment(self, body: PaymentCreateRequest) -> Response:
        payment = await self.payments.create(with_decimals(body.model_dump(), "amount"))
        return send_created(PaymentResponse.model_validate(payment))

    @handle("update")
    async def update_payment(self, payment_id: str, body: PaymentUpdateRequest) -> Response:
        payment = await self.payments.update(
            payment_id, with_decimals(body.model_dump(exclude_unset=True), "amount")
        )
        return send_success(PaymentResponse.model_validate(payment))

    @handle("delete")
    async def delete_payment(self, payment_id: str) -> Response:
        await self.payments.delete(payment_id)
        return send_no_content()
