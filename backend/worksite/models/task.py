"""
Task ORM model and its member/party assignment tables.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worksite.models.base import Base, CreatedAtMixin, IdMixin, TimestampMixin

if TYPE_CHECKING:
    from worksite.models.party import Party
    from worksite.models.stage import Stage
    from worksite.models.user import User


class TaskStatus(str, enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"
    BLOCKED = "BLOCKED"


class Task(Base, IdMixin, TimestampMixin):
    """A unit of work inside exactly one stage."""

    __tablename__ = "tasks"

    organization_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    stage_id: Mapped[str] = mapped_column(
        ForeignKey("stages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    days_allocated: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, name="task_status"),
        nullable=False,
        default=TaskStatus.NOT_STARTED,
    )

    # Relationships
    stage: Mapped[Stage] = relationship("Stage", back_populates="tasks")
    member_assignments: Mapped[list[TaskMemberAssignment]] = relationship(
        "TaskMemberAssignment",
        back_populates="task",
        cascade="all, delete-orphan",
    )
    party_assignments: Mapped[list[TaskPartyAssignment]] = relationship(
        "TaskPartyAssignment",
        back_populates="task",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Task id={self.id} name={self.name} status={self.status}>"


class TaskMemberAssignment(Base, IdMixin, CreatedAtMixin):
    """Assigns an organization member (by user id) to a task."""

    __tablename__ = "task_member_assignments"
    __table_args__ = (
        UniqueConstraint("task_id", "user_id", name="uq_task_member"),
    )

    task_id: Mapped[str] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    task: Mapped[Task] = relationship("Task", back_populates="member_assignments")
    user: Mapped[User] = relationship("User")


class TaskPartyAssignment(Base, IdMixin, CreatedAtMixin):
    """Assigns a labour or subcontractor party to a task."""

    __tablename__ = "task_party_assignments"
    __table_args__ = (
        UniqueConstraint("task_id", "party_id", name="uq_task_party"),
    )

    task_id: Mapped[str] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    party_id: Mapped[str] = mapped_column(
        ForeignKey("parties.id", ondelete="CASCADE"), nullable=False, index=True
    )

    task: Mapped[Task] = relationship("Task", back_populates="party_assignments")
    party: Mapped[Party] = relationship("Party")
