"""
Category schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from worksite.schemas.common import CamelModel


class CategoryItemCreateRequest(CamelModel):
    category_type_id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=100)


class CategoryItemUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    is_active: bool | None = None


class CategoryItemResponse(CamelModel):
    id: str
    organization_id: str
    category_type_id: str
    name: str
    is_editable: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CategoryTypeResponse(CamelModel):
    id: str
    key: str
    label: str
    items: list[CategoryItemResponse] = []
