"""
Payment schemas.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import Field

from worksite.models.payment import PaymentMode, PaymentType
from worksite.schemas.common import CamelModel


class PaymentCreateRequest(CamelModel):
    project_id: str = Field(min_length=1)
    party_id: str | None = None
    expense_id: str | None = None
    type: PaymentType
    payment_mode: PaymentMode
    amount: float = Field(gt=0)
    payment_date: date
    notes: str | None = None


class PaymentUpdateRequest(CamelModel):
    party_id: str | None = None
    expense_id: str | None = None
    type: PaymentType | None = None
    payment_mode: PaymentMode | None = None
    amount: float | None = Field(default=None, gt=0)
    payment_date: date | None = None
    notes: str | None = None


class PaymentResponse(CamelModel):
    id: str
    organization_id: str
    project_id: str
    party_id: str | None
    expense_id: str | None
    type: PaymentType
    payment_mode: PaymentMode
    amount: float
    payment_date: date
    notes: str | None
    created_at: datetime


class PaymentSummaryResponse(CamelModel):
    total: float
    count: int
    total_in: float
    total_out: float
