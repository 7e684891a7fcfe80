"""
OrganizationMember ORM model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worksite.models.base import Base, CreatedAtMixin, IdMixin

if TYPE_CHECKING:
    from worksite.models.organization import Organization
    from worksite.models.role import Role
    from worksite.models.user import User


class OrganizationMember(Base, IdMixin, CreatedAtMixin):
    """Join table linking a user to an organization with exactly one role."""

    __tablename__ = "organization_members"
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_org_members_org_user"),
    )

    organization_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role_id: Mapped[str] = mapped_column(
        ForeignKey("roles.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    # Relationships
    organization: Mapped[Organization] = relationship(
        "Organization", back_populates="members"
    )
    user: Mapped[User] = relationship("User", back_populates="memberships")
    role: Mapped[Role] = relationship("Role", back_populates="members")

    def __repr__(self) -> str:
        return f"<OrganizationMember org_id={self.organization_id} user_id={self.user_id}>"
