"""
Party schemas.
"""

from __future__ import annotations

import datetime as dt
from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from worksite.models.party import PartyType
from worksite.schemas.common import CamelModel, require_phone_digits


class PartyCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=1, max_length=20)
    location: str = Field(min_length=1, max_length=255)
    type: PartyType

    @field_validator("phone")
    @classmethod
    def _phone_digits(cls, v: str) -> str:
        require_phone_digits(v)
        return v


class PartyUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, min_length=1, max_length=20)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    type: PartyType | None = None

    @field_validator("phone")
    @classmethod
    def _phone_digits(cls, v: str | None) -> str | None:
        return require_phone_digits(v)


class PartyResponse(CamelModel):
    id: str
    organization_id: str
    name: str
    phone: str | None
    location: str
    type: PartyType
    created_at: datetime


class PartyWithBalanceResponse(PartyResponse):
    balance: float = 0


class PartyStatsResponse(CamelModel):
    total_expenses: float
    total_payments: float
    balance: float


class PartySummaryResponse(CamelModel):
    total_vendors: int
    total_labours: int
    total_subcontractors: int
    vendors_balance: float
    labours_balance: float
    subcontractors_balance: float


class PartyProjectCredit(CamelModel):
    """A project the party has worked on, with what it is owed there."""

    id: str
    name: str
    total_expenses: float
    total_payments: float
    credit: float


class PartyProjectTotals(CamelModel):
    total_expenses: float
    total_payments: float
    credit: float


class TransactionResponse(CamelModel):
    """An expense or payment row in a party's ledger."""

    id: str
    tab: Literal["expense", "payment"]
    date: dt.date
    title: str
    amount: float
    project_id: str
