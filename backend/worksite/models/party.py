"""
Party ORM model.
"""

from __future__ import annotations

import enum

from sqlalchemy import Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from worksite.models.base import Base, CreatedAtMixin, IdMixin


class PartyType(str, enum.Enum):
    VENDOR = "VENDOR"
    LABOUR = "LABOUR"
    SUBCONTRACTOR = "SUBCONTRACTOR"


# Party types that can be assigned to tasks
ASSIGNABLE_PARTY_TYPES = frozenset({PartyType.LABOUR, PartyType.SUBCONTRACTOR})


class Party(Base, IdMixin, CreatedAtMixin):
    """External counterparty the organization pays or owes."""

    __tablename__ = "parties"

    organization_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[PartyType] = mapped_column(
        Enum(PartyType, name="party_type"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Party id={self.id} name={self.name} type={self.type}>"
