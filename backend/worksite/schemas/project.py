"""
Project schemas.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import Field, model_validator

from worksite.models.project import ProjectStatus
from worksite.schemas.common import CamelModel


class ProjectCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    location: str = Field(min_length=1, max_length=255)
    start_date: date
    end_date: date | None = None
    amount: float | None = Field(default=None, ge=0)
    area: str | None = Field(default=None, max_length=100)
    status: ProjectStatus = ProjectStatus.ACTIVE

    @model_validator(mode="after")
    def _dates_ordered(self) -> "ProjectCreateRequest":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class ProjectUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    start_date: date | None = None
    end_date: date | None = None
    amount: float | None = Field(default=None, ge=0)
    area: str | None = Field(default=None, max_length=100)
    status: ProjectStatus | None = None


class ProjectResponse(CamelModel):
    id: str
    organization_id: str
    name: str
    location: str
    start_date: date
    end_date: date | None
    amount: float | None
    area: str | None
    status: ProjectStatus
    created_at: datetime
    updated_at: datetime


class ProjectStatsResponse(CamelModel):
    total_expenses: float
    total_payments: float
    total_payments_in: float
    total_payments_out: float
    balance: float
