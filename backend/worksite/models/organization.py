"""
Organization ORM model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worksite.models.base import Base, CreatedAtMixin, IdMixin

if TYPE_CHECKING:
    from worksite.models.member import OrganizationMember
    from worksite.models.project import Project
    from worksite.models.role import Role


class Organization(Base, IdMixin, CreatedAtMixin):
    """Tenant that owns members, roles, projects and parties."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    members: Mapped[list[OrganizationMember]] = relationship(
        "OrganizationMember",
        back_populates="organization",
        cascade="all, delete-orphan",
    )
    roles: Mapped[list[Role]] = relationship(
        "Role",
        back_populates="organization",
        cascade="all, delete-orphan",
    )
    projects: Mapped[list[Project]] = relationship(
        "Project",
        back_populates="organization",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Organization id={self.id} name={self.name}>"
