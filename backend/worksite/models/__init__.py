"""
SQLAlchemy ORM models.

All models imported here to ensure they are registered with Base.metadata.
"""

from worksite.models.base import Base, CreatedAtMixin, IdMixin, TimestampMixin
from worksite.models.organization import Organization
from worksite.models.user import User
from worksite.models.role import ADMIN_ROLE, SYSTEM_ROLES, Role
from worksite.models.member import OrganizationMember
from worksite.models.project import Project, ProjectStatus
from worksite.models.stage import Stage, StageStatus
from worksite.models.party import ASSIGNABLE_PARTY_TYPES, Party, PartyType
from worksite.models.task import Task, TaskMemberAssignment, TaskPartyAssignment, TaskStatus
from worksite.models.category import DEFAULT_CATEGORY_TYPES, EXPENSE_TYPE, CategoryItem, CategoryType
from worksite.models.expense import Expense, ExpenseStatus
from worksite.models.payment import Payment, PaymentMode, PaymentType

__all__ = [
    "Base",
    "CreatedAtMixin",
    "IdMixin",
    "TimestampMixin",
    "Organization",
    "User",
    "ADMIN_ROLE",
    "SYSTEM_ROLES",
    "Role",
    "OrganizationMember",
    "Project",
    "ProjectStatus",
    "Stage",
    "StageStatus",
    "ASSIGNABLE_PARTY_TYPES",
    "Party",
    "PartyType",
    "Task",
    "TaskMemberAssignment",
    "TaskPartyAssignment",
    "TaskStatus",
    "DEFAULT_CATEGORY_TYPES",
    "EXPENSE_TYPE",
    "CategoryItem",
    "CategoryType",
    "Expense",
    "ExpenseStatus",
    "Payment",
    "PaymentMode",
    "PaymentType",
]
