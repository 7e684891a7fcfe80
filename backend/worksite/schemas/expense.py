"""
Expense schemas.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import Field

from worksite.models.expense import ExpenseStatus
from worksite.schemas.common import CamelModel


class ExpenseCreateRequest(CamelModel):
    project_id: str = Field(min_length=1)
    party_id: str = Field(min_length=1)
    stage_id: str | None = None
    expense_type_item_id: str = Field(min_length=1)
    material_type_item_id: str | None = None
    labour_type_item_id: str | None = None
    sub_work_type_item_id: str | None = None
    description: str | None = None
    rate: float = Field(gt=0)
    quantity: float = Field(gt=0)
    expense_date: date
    status: ExpenseStatus = ExpenseStatus.PENDING
    notes: str | None = None


class ExpenseUpdateRequest(CamelModel):
    party_id: str | None = Field(default=None, min_length=1)
    stage_id: str | None = None
    expense_type_item_id: str | None = Field(default=None, min_length=1)
    material_type_item_id: str | None = None
    labour_type_item_id: str | None = None
    sub_work_type_item_id: str | None = None
    description: str | None = None
    rate: float | None = Field(default=None, gt=0)
    quantity: float | None = Field(default=None, gt=0)
    expense_date: date | None = None
    status: ExpenseStatus | None = None
    notes: str | None = None


class ExpenseResponse(CamelModel):
    id: str
    organization_id: str
    project_id: str
    party_id: str
    stage_id: str | None
    expense_type_item_id: str
    material_type_item_id: str | None
    labour_type_item_id: str | None
    sub_work_type_item_id: str | None
    description: str | None
    rate: float
    quantity: float
    amount: float
    expense_date: date
    status: ExpenseStatus
    notes: str | None
    created_at: datetime


class ExpenseCategorySummary(CamelModel):
    category_id: str
    category_name: str
    total: float
    count: int
