"""
Stage schemas.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import Field, model_validator

from worksite.models.stage import StageStatus
from worksite.schemas.common import CamelModel


class StageCreateRequest(CamelModel):
    project_id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    start_date: date
    end_date: date
    budget_amount: float = Field(ge=0)
    weight: float = Field(default=0, ge=0, le=100)
    status: StageStatus = StageStatus.SCHEDULED

    @model_validator(mode="after")
    def _dates_ordered(self) -> "StageCreateRequest":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class StageUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    budget_amount: float | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0, le=100)
    status: StageStatus | None = None


class StageResponse(CamelModel):
    id: str
    organization_id: str
    project_id: str
    name: str
    description: str | None
    start_date: date
    end_date: date
    budget_amount: float
    weight: float
    status: StageStatus
    created_at: datetime
    updated_at: datetime


class StageStatsResponse(CamelModel):
    budget_amount: float
    total_expenses: float
    remaining: float
    percent_used: float
    task_count: int
    completed_task_count: int
    completion_percent: float
