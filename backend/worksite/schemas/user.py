"""
User schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field

from worksite.schemas.common import PHONE_PATTERN, CamelModel


class UserCreateRequest(CamelModel):
    """Request body for POST /users."""

    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=1, max_length=20, pattern=PHONE_PATTERN)
    email: EmailStr | None = None
    location: str | None = Field(default=None, max_length=255)


class UserUpdateRequest(CamelModel):
    """Request body for PUT /users/{id}; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=20, pattern=PHONE_PATTERN)
    email: EmailStr | None = None
    location: str | None = Field(default=None, max_length=255)


class UserResponse(CamelModel):
    id: str
    name: str
    phone: str | None
    email: str | None
    location: str | None
    created_at: datetime


class RoleSummary(CamelModel):
    id: str
    name: str
    is_system_role: bool


class UserOrganizationResponse(CamelModel):
    """An organization the user belongs to, with derived counts."""

    id: str
    name: str
    created_at: datetime
    membership_id: str
    role: RoleSummary
    member_count: int
    project_count: int
