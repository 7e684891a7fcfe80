"""
Category ORM models.

Category types group the pick-lists an organization maintains (expense
types, material types, ...). Items are the entries of those lists; an
expense always references an item of the `expense_type` type.
"""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worksite.models.base import Base, CreatedAtMixin, IdMixin, TimestampMixin

EXPENSE_TYPE = "expense_type"
MATERIAL_TYPE = "material_type"
LABOUR_TYPE = "labour_type"
SUB_WORK_TYPE = "sub_work_type"
PROJECT_TYPE = "project_type"

# Seeded into every new organization: key -> (label, locked items).
DEFAULT_CATEGORY_TYPES: dict[str, tuple[str, tuple[str, ...]]] = {
    EXPENSE_TYPE: ("Expense Types", ("Material", "Labour", "Sub Work")),
    MATERIAL_TYPE: ("Material Types", ()),
    LABOUR_TYPE: ("Labour Types", ()),
    SUB_WORK_TYPE: ("Sub Work Types", ()),
    PROJECT_TYPE: ("Project Types", ()),
}


class CategoryType(Base, IdMixin, CreatedAtMixin):
    __tablename__ = "category_types"
    __table_args__ = (
        UniqueConstraint("organization_id", "key", name="uq_category_types_org_key"),
    )

    organization_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key: Mapped[str] = mapped_column(String(50), nullable=False)
    label: Mapped[str] = mapped_column(String(100), nullable=False)

    # Relationships
    items: Mapped[list[CategoryItem]] = relationship(
        "CategoryItem", back_populates="category_type", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<CategoryType id={self.id} key={self.key}>"


class CategoryItem(Base, IdMixin, TimestampMixin):
    """One entry of a category type. Seeded items are locked (is_editable False)."""

    __tablename__ = "category_items"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "category_type_id", "name", name="uq_category_items_org_type_name"
        ),
    )

    organization_id: Mapped[str] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_type_id: Mapped[str] = mapped_column(
        ForeignKey("category_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_editable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    category_type: Mapped[CategoryType] = relationship("CategoryType", back_populates="items")

    def __repr__(self) -> str:
        return f"<CategoryItem id={self.id} name={self.name} editable={self.is_editable}>"
