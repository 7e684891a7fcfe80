"""
Team member schemas.

A team member is a user seen through its membership in the current organization.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field, model_validator

from worksite.schemas.common import PHONE_PATTERN, CamelModel
from worksite.schemas.user import RoleSummary


class TeamMemberCreateRequest(CamelModel):
    """Request body for POST /team. At least one of phone or email is required."""

    name: str = Field(min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=20, pattern=PHONE_PATTERN)
    email: EmailStr | None = None
    location: str | None = Field(default=None, max_length=255)
    role_id: str = Field(min_length=1)

    @model_validator(mode="after")
    def _phone_or_email(self) -> "TeamMemberCreateRequest":
        if not self.phone and not self.email:
            raise ValueError("Either phone or email is required")
        return self


class TeamMemberUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=20, pattern=PHONE_PATTERN)
    email: EmailStr | None = None
    location: str | None = Field(default=None, max_length=255)
    role_id: str | None = Field(default=None, min_length=1)


class MembershipResponse(CamelModel):
    id: str
    role_id: str
    role: RoleSummary


class TeamMemberResponse(CamelModel):
    id: str
    name: str
    phone: str | None
    email: str | None
    location: str | None
    created_at: datetime
    membership: MembershipResponse
