"""Create project tracker tables

Revision ID: 6b1f0c2d9a4e
Revises:
Create Date: 2026-10-19 10:12:40.118532

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '6b1f0c2d9a4e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    # Catalog tables
    op.create_table(
        'yarns',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('brand', sa.String(length=200), nullable=True),
        sa.Column('weight', sa.String(length=50), nullable=True),
        sa.Column('fiber_content', sa.String(length=200), nullable=True),
        sa.Column('color', sa.String(length=100), nullable=True),
        sa.Column('lot_number', sa.String(length=100), nullable=True),
        sa.Column('length_meters', sa.Float(), nullable=True),
        sa.Column('weight_grams', sa.Float(), nullable=True),
        sa.Column('price_per_unit', sa.Float(), nullable=True),
        sa.Column('currency', sa.String(length=3), server_default='EUR', nullable=False),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('purchase_location', sa.String(length=200), nullable=True),
        sa.Column('quantity_in_stash', sa.Float(), server_default='1', nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_yarns_brand_name', 'yarns', ['brand', 'name'])
    op.create_index('idx_yarns_weight', 'yarns', ['weight'])

    op.create_table(
        'needles',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('size_mm', sa.Float(), nullable=False),
        sa.Column('size_us', sa.String(length=20), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('length_cm', sa.Float(), nullable=True),
        sa.Column('material', sa.String(length=100), nullable=True),
        sa.Column('brand', sa.String(length=200), nullable=True),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('currency', sa.String(length=3), server_default='EUR', nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_needles_size_mm', 'needles', ['size_mm'])

    op.create_table(
        'hooks',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('size_mm', sa.Float(), nullable=False),
        sa.Column('size_us', sa.String(length=50), nullable=True),
        sa.Column('material', sa.String(length=100), nullable=True),
        sa.Column('brand', sa.String(length=200), nullable=True),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('currency', sa.String(length=3), server_default='EUR', nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_hooks_size_mm', 'hooks', ['size_mm'])

    # Projects keep their usage items and costs as embedded JSON lists
    op.create_table(
        'projects',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('project_type', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='active', nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('completion_date', sa.Date(), nullable=True),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.Column('yarns_used', sa.JSON(), nullable=False),
        sa.Column('needles_used', sa.JSON(), nullable=False),
        sa.Column('hooks_used', sa.JSON(), nullable=False),
        sa.Column('additional_costs', sa.JSON(), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_projects_status', 'projects', ['status'])
    op.create_index('idx_projects_project_type', 'projects', ['project_type'])
    op.create_index('idx_projects_updated_at', 'projects', ['updated_at'])

    # Measurement tables
    op.create_table(
        'gauges',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('gauge_type', sa.String(length=20), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('yarn_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('needle_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('hook_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('stitches', sa.Float(), nullable=False),
        sa.Column('rows', sa.Float(), nullable=False),
        sa.Column('width_cm', sa.Float(), nullable=False),
        sa.Column('height_cm', sa.Float(), nullable=False),
        sa.Column('photos', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['yarn_id'], ['yarns.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['needle_id'], ['needles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['hook_id'], ['hooks.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_gauges_project_id', 'gauges', ['project_id'])

    op.create_table(
        'conversions',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('gauge_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('conversion_data', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['gauge_id'], ['gauges.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_conversions_project_id', 'conversions', ['project_id'])
    op.create_index('idx_conversions_gauge_id', 'conversions', ['gauge_id'])
    op.create_index('idx_conversions_project_gauge', 'conversions', ['project_id', 'gauge_id'])


def downgrade() -> None:
    op.drop_index('idx_conversions_project_gauge', table_name='conversions')
    op.drop_index('idx_conversions_gauge_id', table_name='conversions')
    op.drop_index('idx_conversions_project_id', table_name='conversions')
    op.drop_table('conversions')
    op.drop_index('idx_gauges_project_id', table_name='gauges')
    op.drop_table('gauges')
    op.drop_index('idx_projects_updated_at', table_name='projects')
    op.drop_index('idx_projects_project_type', table_name='projects')
    op.drop_index('idx_projects_status', table_name='projects')
    op.drop_table('projects')
    op.drop_index('idx_hooks_size_mm', table_name='hooks')
    op.drop_table('hooks')
    op.drop_index('idx_needles_size_mm', table_name='needles')
    op.drop_table('needles')
    op.drop_index('idx_yarns_weight', table_name='yarns')
    op.drop_index('idx_yarns_brand_name', table_name='yarns')
    op.drop_table('yarns')
