"""
Role ORM model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worksite.models.base import Base, IdMixin, TimestampMixin

if TYPE_CHECKING:
    from worksite.models.member import OrganizationMember
    from worksite.models.organization import Organization

ADMIN_ROLE = "Admin"

# Seeded into every new organization; cannot be deleted.
SYSTEM_ROLES: dict[str, str] = {
    ADMIN_ROLE: "Full access to the organization",
    "Manager": "Manages projects, stages and tasks",
    "Member": "Works on assigned tasks",
}


class Role(Base, IdMixin, TimestampMixin):
    """Named role scoped to an organization."""

    __tablename__ = "roles"
    __table_args__ = (
        UniqueConstraint("organization_id", "name", name="uq_roles_org_name"),
    )

    organization_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system_role: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    organization: Mapped[Organization] = relationship("Organization", back_populates="roles")
    members: Mapped[list[OrganizationMember]] = relationship(
        "OrganizationMember", back_populates="role"
    )

    def __repr__(self) -> str:
        return f"<Role id={self.id} name={self.name} system={self.is_system_role}>"
