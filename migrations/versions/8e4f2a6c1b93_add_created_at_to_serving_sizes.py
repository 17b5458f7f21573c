"""add created_at to serving sizes

Revision ID: 8e4f2a6c1b93
Revises: 3a7c1e9b2d40
Create Date: 2026-10-17 10:41:27.318204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '8e4f2a6c1b93'
down_revision = '3a7c1e9b2d40'
branch_labels = None
depends_on = None


def upgrade():
    op.add_column('serving_sizes', sa.Column('created_at', sa.DateTime(timezone=True), nullable=True))


def downgrade():
    with op.batch_alter_table('serving_sizes') as batch_op:
        batch_op.drop_column('created_at')
