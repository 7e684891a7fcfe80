"""
Organization schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from worksite.schemas.common import CamelModel


class OrganizationCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)


class OrganizationUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)


class OrganizationResponse(CamelModel):
    id: str
    name: str
    created_at: datetime
    member_count: int = 0
    project_count: int = 0
