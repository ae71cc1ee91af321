"""Add photos to yarns

Revision ID: 9c4d2e7f1a3b
Revises: 6b1f0c2d9a4e
Create Date: 2026-10-19 16:40:02.507311

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '9c4d2e7f1a3b'
down_revision: Union[str, None] = '6b1f0c2d9a4e'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table('yarns') as batch_op:
        batch_op.add_column(
            sa.Column('photos', sa.JSON(), server_default=sa.text("'[]'"), nullable=False)
        )


def downgrade() -> None:
    with op.batch_alter_table('yarns') as batch_op:
        batch_op.drop_column('photos')
