"""
Task schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from worksite.models.party import PartyType
from worksite.models.task import TaskStatus
from worksite.schemas.common import CamelModel


class TaskCreateRequest(CamelModel):
    """Request body for POST /tasks."""

    stage_id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    days_allocated: int = Field(ge=1)
    status: TaskStatus = TaskStatus.NOT_STARTED
    member_ids: list[str] = Field(default_factory=list)
    party_ids: list[str] = Field(default_factory=list)


class TaskUpdateRequest(CamelModel):
    """Request body for PUT /tasks/{id}; a new stageId moves the task."""

    stage_id: str | None = Field(default=None, min_length=1)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    days_allocated: int | None = Field(default=None, ge=1)
    status: TaskStatus | None = None
    member_ids: list[str] | None = None
    party_ids: list[str] | None = None


class TaskStatusUpdateRequest(CamelModel):
    status: TaskStatus


class AssignedMember(CamelModel):
    id: str
    name: str
    phone: str | None


class AssignedParty(CamelModel):
    id: str
    name: str
    type: PartyType


class TaskResponse(CamelModel):
    id: str
    organization_id: str
    stage_id: str
    name: str
    description: str | None
    days_allocated: int
    status: TaskStatus
    members: list[AssignedMember] = Field(default_factory=list)
    parties: list[AssignedParty] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
