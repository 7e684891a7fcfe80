"""
Role schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from worksite.schemas.common import CamelModel


class RoleCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)


class RoleUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)


class RoleResponse(CamelModel):
    id: str
    organization_id: str
    name: str
    description: str | None
    is_system_role: bool
    member_count: int = 0
    created_at: datetime
    updated_at: datetime
