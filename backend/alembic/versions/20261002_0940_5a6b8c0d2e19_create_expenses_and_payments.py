"""create_expenses_and_payments

Revision ID: 5a6b8c0d2e19
Revises: e91f2a7c5d84
Create Date: 2026-10-02 09:40:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '5a6b8c0d2e19'
down_revision: Union[str, None] = 'e91f2a7c5d84'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create expenses and payments tables."""
    op.create_table(
        'expenses',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('organization_id', sa.String(length=36), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('project_id', sa.String(length=36), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('party_id', sa.String(length=36), sa.ForeignKey('parties.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('stage_id', sa.String(length=36), sa.ForeignKey('stages.id', ondelete='SET NULL'), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('rate', sa.Numeric(15, 2), nullable=False),
        sa.Column('quantity', sa.Numeric(15, 4), nullable=False),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'APPROVED', name='expense_status'), nullable=False, server_default='PENDING'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_expenses_organization_id', 'expenses', ['organization_id'])
    op.create_index('ix_expenses_project_id', 'expenses', ['project_id'])
    op.create_index('ix_expenses_party_id', 'expenses', ['party_id'])
    op.create_index('ix_expenses_stage_id', 'expenses', ['stage_id'])
    op.create_index('ix_expenses_category', 'expenses', ['category'])

    op.create_table(
        'payments',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('organization_id', sa.String(length=36), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('project_id', sa.String(length=36), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('party_id', sa.String(length=36), sa.ForeignKey('parties.id', ondelete='SET NULL'), nullable=True),
        sa.Column('expense_id', sa.String(length=36), sa.ForeignKey('expenses.id', ondelete='SET NULL'), nullable=True),
        sa.Column('type', sa.Enum('IN', 'OUT', name='payment_type'), nullable=False),
        sa.Column('payment_mode', sa.Enum('CASH', 'CHEQUE', 'ONLINE', name='payment_mode'), nullable=False),
        sa.Column('amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_payments_organization_id', 'payments', ['organization_id'])
    op.create_index('ix_payments_project_id', 'payments', ['project_id'])
    op.create_index('ix_payments_party_id', 'payments', ['party_id'])


def downgrade() -> None:
    """Drop payments and expenses tables and their enums."""
    op.drop_index('ix_payments_party_id', table_name='payments')
    op.drop_index('ix_payments_project_id', table_name='payments')
    op.drop_index('ix_payments_organization_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_expenses_category', table_name='expenses')
    op.drop_index('ix_expenses_stage_id', table_name='expenses')
    op.drop_index('ix_expenses_party_id', table_name='expenses')
    op.drop_index('ix_expenses_project_id', table_name='expenses')
    op.drop_index('ix_expenses_organization_id', table_name='expenses')
    op.drop_table('expenses')
    sa.Enum(name='payment_mode').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='payment_type').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='expense_status').drop(op.get_bind(), checkfirst=True)
