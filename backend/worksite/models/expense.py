"""
Expense ORM model.
"""

from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worksite.models.base import Base, CreatedAtMixin, IdMixin

if TYPE_CHECKING:
    from worksite.models.party import Party


class ExpenseStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"


class Expense(Base, IdMixin, CreatedAtMixin):
    """A cost booked against a project and a party; amount is rate * quantity.

    Its category is an item of the organization's `expense_type` list.
    """

    __tablename__ = "expenses"

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
    party_id: Mapped[str] = mapped_column(
        ForeignKey("parties.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    stage_id: Mapped[str | None] = mapped_column(
        ForeignKey("stages.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    expense_type_item_id: Mapped[str] = mapped_column(
        ForeignKey("category_items.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    material_type_item_id: Mapped[str | None] = mapped_column(
        ForeignKey("category_items.id", ondelete="SET NULL"), nullable=True
    )
    labour_type_item_id: Mapped[str | None] = mapped_column(
        ForeignKey("category_items.id", ondelete="SET NULL"), nullable=True
    )
    sub_work_type_item_id: Mapped[str | None] = mapped_column(
        ForeignKey("category_items.id", ondelete="SET NULL"), nullable=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    rate: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(15, 4), nullable=False)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[ExpenseStatus] = mapped_column(
        Enum(ExpenseStatus, name="expense_status"),
        nullable=False,
        default=ExpenseStatus.PENDING,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    party: Mapped[Party] = relationship("Party")

    @property
    def amount(self) -> Decimal:
        return Decimal(self.rate) * Decimal(self.quantity)

    def __repr__(self) -> str:
        return f"<Expense id={self.id} type_item={self.expense_type_item_id} amount={self.amount}>"
