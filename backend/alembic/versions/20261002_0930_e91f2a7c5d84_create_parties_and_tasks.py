"""create_parties_and_tasks

Revision ID: e91f2a7c5d84
Revises: c47d9e1b3f56
Create Date: 2026-10-02 09:30:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = 'e91f2a7c5d84'
down_revision: Union[str, None] = 'c47d9e1b3f56'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create parties, tasks and the task assignment tables."""
    op.create_table(
        'parties',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('organization_id', sa.String(length=36), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('type', sa.Enum('VENDOR', 'LABOUR', 'SUBCONTRACTOR', name='party_type'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_parties_organization_id', 'parties', ['organization_id'])
    op.create_index('ix_parties_type', 'parties', ['type'])

    op.create_table(
        'tasks',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('organization_id', sa.String(length=36), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('stage_id', sa.String(length=36), sa.ForeignKey('stages.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('days_allocated', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('NOT_STARTED', 'IN_PROGRESS', 'COMPLETED', 'ON_HOLD', 'BLOCKED', name='task_status'),
            nullable=False,
            server_default='NOT_STARTED',
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_tasks_organization_id', 'tasks', ['organization_id'])
    op.create_index('ix_tasks_stage_id', 'tasks', ['stage_id'])

    op.create_table(
        'task_member_assignments',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('task_id', sa.String(length=36), sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('task_id', 'user_id', name='uq_task_member'),
    )
    op.create_index('ix_task_member_assignments_task_id', 'task_member_assignments', ['task_id'])
    op.create_index('ix_task_member_assignments_user_id', 'task_member_assignments', ['user_id'])

    op.create_table(
        'task_party_assignments',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('task_id', sa.String(length=36), sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('party_id', sa.String(length=36), sa.ForeignKey('parties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('task_id', 'party_id', name='uq_task_party'),
    )
    op.create_index('ix_task_party_assignments_task_id', 'task_party_assignments', ['task_id'])
    op.create_index('ix_task_party_assignments_party_id', 'task_party_assignments', ['party_id'])


def downgrade() -> None:
    """Drop task assignment tables, tasks and parties."""
    op.drop_index('ix_task_party_assignments_party_id', table_name='task_party_assignments')
    op.drop_index('ix_task_party_assignments_task_id', table_name='task_party_assignments')
    op.drop_table('task_party_assignments')
    op.drop_index('ix_task_member_assignments_user_id', table_name='task_member_assignments')
    op.drop_index('ix_task_member_assignments_task_id', table_name='task_member_assignments')
    op.drop_table('task_member_assignments')
    op.drop_index('ix_tasks_stage_id', table_name='tasks')
    op.drop_index('ix_tasks_organization_id', table_name='tasks')
    op.drop_table('tasks')
    op.drop_index('ix_parties_type', table_name='parties')
    op.drop_index('ix_parties_organization_id', table_name='parties')
    op.drop_table('parties')
    sa.Enum(name='task_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='party_type').drop(op.get_bind(), checkfirst=True)
