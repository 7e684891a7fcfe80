"""create_categories

Revision ID: 7c3e5f9a1b42
Revises: 5a6b8c0d2e19
Create Date: 2026-10-19 10:00:00

"""
from typing import Sequence, Union
from uuid import uuid4

from alembic import op
import sqlalchemy as sa

revision: str = '7c3e5f9a1b42'
down_revision: Union[str, None] = '5a6b8c0d2e19'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEFAULT_TYPES = (
    ('expense_type', 'Expense Types', ('Material', 'Labour', 'Sub Work')),
    ('material_type', 'Material Types', ()),
    ('labour_type', 'Labour Types', ()),
    ('sub_work_type', 'Sub Work Types', ()),
    ('project_type', 'Project Types', ()),
)

category_types = sa.table(
    'category_types',
    sa.column('id', sa.String),
    sa.column('organization_id', sa.String),
    sa.column('key', sa.String),
    sa.column('label', sa.String),
)
category_items = sa.table(
    'category_items',
    sa.column('id', sa.String),
    sa.column('organization_id', sa.String),
    sa.column('category_type_id', sa.String),
    sa.column('name', sa.String),
    sa.column('is_editable', sa.Boolean),
    sa.column('is_active', sa.Boolean),
)


def _seed_and_link_expenses() -> None:
    """Seed default categories per organization and point expenses at items by name."""
    bind = op.get_bind()
    org_ids = [row[0] for row in bind.execute(sa.text('SELECT id FROM organizations'))]
    for org_id in org_ids:
        items: dict[str, str] = {}
        expense_type_id = None
        for key, label, names in DEFAULT_TYPES:
            type_id = str(uuid4())
            if key == 'expense_type':
                expense_type_id = type_id
            bind.execute(category_types.insert().values(id=type_id, organization_id=org_id, key=key, label=label))
            for name in names:
                items[name] = str(uuid4())
                bind.execute(category_items.insert().values(
                    id=items[name], organization_id=org_id, category_type_id=type_id,
                    name=name, is_editable=False, is_active=True,
                ))

        used = bind.execute(
            sa.text('SELECT DISTINCT category FROM expenses WHERE organization_id = :org'),
            {'org': org_id},
        ).all()
        for (name,) in used:
            if name not in items:
                items[name] = str(uuid4())
                bind.execute(category_items.insert().values(
                    id=items[name], organization_id=org_id, category_type_id=expense_type_id,
                    name=name, is_editable=True, is_active=True,
                ))
            bind.execute(
                sa.text(
                    'UPDATE expenses SET expense_type_item_id = :item '
                    'WHERE organization_id = :org AND category = :name'
                ),
                {'item': items[name], 'org': org_id, 'name': name},
            )


def upgrade() -> None:
    """Create category types and items; expenses reference an expense type item."""
    op.create_table(
        'category_types',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('organization_id', sa.String(length=36), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('key', sa.String(length=50), nullable=False),
        sa.Column('label', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('organization_id', 'key', name='uq_category_types_org_key'),
    )
    op.create_index('ix_category_types_organization_id', 'category_types', ['organization_id'])

    op.create_table(
        'category_items',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('organization_id', sa.String(length=36), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('category_type_id', sa.String(length=36), sa.ForeignKey('category_types.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('is_editable', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('organization_id', 'category_type_id', 'name', name='uq_category_items_org_type_name'),
    )
    op.create_index('ix_category_items_organization_id', 'category_items', ['organization_id'])
    op.create_index('ix_category_items_category_type_id', 'category_items', ['category_type_id'])

    with op.batch_alter_table('expenses') as batch:
        batch.add_column(sa.Column('expense_type_item_id', sa.String(length=36), nullable=True))
        for column in ('material_type_item_id', 'labour_type_item_id', 'sub_work_type_item_id'):
            batch.add_column(sa.Column(column, sa.String(length=36), nullable=True))

    _seed_and_link_expenses()

    with op.batch_alter_table('expenses') as batch:
        batch.alter_column('expense_type_item_id', existing_type=sa.String(length=36), nullable=False)
        batch.create_foreign_key(
            'fk_expenses_expense_type_item_id', 'category_items',
            ['expense_type_item_id'], ['id'], ondelete='RESTRICT',
        )
        for column in ('material_type_item_id', 'labour_type_item_id', 'sub_work_type_item_id'):
            batch.create_foreign_key(
                f'fk_expenses_{column}', 'category_items', [column], ['id'], ondelete='SET NULL',
            )
        batch.drop_index('ix_expenses_category')
        batch.drop_column('category')
        batch.create_index('ix_expenses_expense_type_item_id', ['expense_type_item_id'])


def downgrade() -> None:
    """Restore the free-text expense category and drop the category tables."""
    with op.batch_alter_table('expenses') as batch:
        batch.add_column(sa.Column('category', sa.String(length=100), nullable=True))

    op.execute(
        'UPDATE expenses SET category = '
        '(SELECT name FROM category_items WHERE category_items.id = expenses.expense_type_item_id)'
    )

    with op.batch_alter_table('expenses') as batch:
        batch.alter_column('category', existing_type=sa.String(length=100), nullable=False)
        batch.create_index('ix_expenses_category', ['category'])
        batch.drop_index('ix_expenses_expense_type_item_id')
        for column in ('sub_work_type_item_id', 'labour_type_item_id', 'material_type_item_id', 'expense_type_item_id'):
            batch.drop_constraint(f'fk_expenses_{column}', type_='foreignkey')
            batch.drop_column(column)

    op.drop_index('ix_category_items_category_type_id', table_name='category_items')
    op.drop_index('ix_category_items_organization_id', table_name='category_items')
    op.drop_table('category_items')
    op.drop_index('ix_category_types_organization_id', table_name='category_types')
    op.drop_table('category_types')
