"""create foods and serving sizes

Revision ID: 3a7c1e9b2d40
Revises: 
Create Date: 2026-10-17 09:12:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3a7c1e9b2d40'
down_revision = None
branch_labels = None
depends_on = None

NUTRIENTS = (
    'energy',
    'protein',
    'fat',
    'fat_saturated',
    'carbs',
    'carbs_sugars',
    'fibre',
    'sodium',
)


def upgrade():
    op.create_table(
        'foods',
        sa.Column('food_id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('brand', sa.Text(), nullable=True),
        sa.Column('serving_unit', sa.Text(), nullable=False),
        *[sa.Column(name, sa.Float(), nullable=False) for name in NUTRIENTS],
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("serving_unit IN ('g', 'ml')", name='ck_foods_serving_unit'),
        sa.CheckConstraint('length(name) > 0', name='ck_foods_name_not_empty'),
        *[
            sa.CheckConstraint(f'{name} >= 0', name=f'ck_foods_{name}_non_negative')
            for name in NUTRIENTS
        ],
    )

    op.create_table(
        'serving_sizes',
        sa.Column('serving_id', sa.Integer(), primary_key=True),
        sa.Column(
            'food_id',
            sa.Integer(),
            sa.ForeignKey('foods.food_id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('serving_name', sa.Text(), nullable=False),
        sa.Column('serving_amount', sa.Float(), nullable=False),
        sa.UniqueConstraint('food_id', 'serving_name', name='uq_serving_sizes_food_name'),
        sa.CheckConstraint('serving_amount > 0', name='ck_serving_sizes_amount_positive'),
        sa.CheckConstraint('length(serving_name) > 0', name='ck_serving_sizes_name_not_empty'),
    )


def downgrade():
    # Drop in reverse dependency order
    op.drop_table('serving_sizes')
    op.drop_table('foods')
