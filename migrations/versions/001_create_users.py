"""Create users table.

Holds identity fields, the per-platform username/score map, the aggregate
total score and the derived rank.

Revision ID: 001
Revises:
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('rollno', sa.String(length=64), nullable=True),
        sa.Column('department', sa.String(length=128), nullable=True),
        sa.Column('section', sa.String(length=32), nullable=True),
        sa.Column('platforms', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='{}'),
        sa.Column('total_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rank', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('idx_users_email', 'users', ['email'])
    op.create_index('idx_users_total_score', 'users', ['total_score'])
    op.create_index('idx_users_rank', 'users', ['rank'])


def downgrade() -> None:
    op.drop_index('idx_users_rank', table_name='users')
    op.drop_index('idx_users_total_score', table_name='users')
    op.drop_index('idx_users_email', table_name='users')
    op.drop_table('users')
