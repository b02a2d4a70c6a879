"""create_users_and_photos

Revision ID: 4c1d2e7f9a10
Revises:
Create Date: 2026-10-19 19:20:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d2e7f9a10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users and photos tables."""
    op.create_table('users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('known_as', sa.String(length=100), nullable=True),
        sa.Column('introduction', sa.Text(), nullable=True),
        sa.Column('looking_for', sa.Text(), nullable=True),
        sa.Column('interests', sa.Text(), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('country', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_active', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username', name='uq_users_username'),
    )
    op.create_index('ix_users_gender', 'users', ['gender'], unique=False)
    op.create_index('ix_users_date_of_birth', 'users', ['date_of_birth'], unique=False)

    op.create_table('photos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=False),
        sa.Column('public_id', sa.String(length=255), nullable=True),
        sa.Column('is_main', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_photos_user_id', 'photos', ['user_id'], unique=False)


def downgrade() -> None:
    """Drop photos and users tables."""
    op.drop_index('ix_photos_user_id', table_name='photos')
    op.drop_table('photos')
    op.drop_index('ix_users_date_of_birth', table_name='users')
    op.drop_index('ix_users_gender', table_name='users')
    op.drop_table('users')
