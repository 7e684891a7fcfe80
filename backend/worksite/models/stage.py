"""
Stage ORM model.
"""

from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worksite.models.base import Base, IdMixin, TimestampMixin

if TYPE_CHECKING:
    from worksite.models.project import Project
    from worksite.models.task import Task


class StageStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"


class Stage(Base, IdMixin, TimestampMixin):
    """A budgeted phase of a project; groups tasks and expenses."""

    __tablename__ = "stages"

    organization_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_id: Mapped[str] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    budget_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    weight: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    status: Mapped[StageStatus] = mapped_column(
        Enum(StageStatus, name="stage_status"),
        nullable=False,
        default=StageStatus.SCHEDULED,
    )

    # Relationships
    project: Mapped[Project] = relationship("Project", back_populates="stages")
    tasks: Mapped[list[Task]] = relationship(
        "Task",
        back_populates="stage",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Stage id={self.id} name={self.name} project_id={self.project_id}>"
