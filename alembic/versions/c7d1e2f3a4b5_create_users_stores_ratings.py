"""create_users_stores_ratings

Revision ID: c7d1e2f3a4b5
Revises:
Create Date: 2026-10-19 10:00:00.000000

사용자, 매장, 평점 테이블 생성.
Create users, stores and ratings tables with their deletion policies:
stores.owner_id RESTRICT, ratings.user_id / ratings.store_id CASCADE.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = 'c7d1e2f3a4b5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # users — 사용자 계정 (globally unique email, one role per user)
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='normal_user'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('email', name='users_email_key'),
        sa.CheckConstraint("role IN ('admin', 'normal_user', 'store_owner')", name='user_role'),
    )

    # stores — 매장 (owner deletion RESTRICTed while stores exist)
    op.create_table(
        'stores',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('owner_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_stores_owner_id', 'stores', ['owner_id'])

    # ratings — 평점 (one per user per store, score 1..5)
    op.create_table(
        'ratings',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('store_id', UUID(as_uuid=True), sa.ForeignKey('stores.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'store_id', name='uq_rating_user_store'),
        sa.CheckConstraint('score >= 1 AND score <= 5', name='ck_rating_score_range'),
    )
    op.create_index('ix_ratings_store_id', 'ratings', ['store_id'])


def downgrade() -> None:
    op.drop_index('ix_ratings_store_id', table_name='ratings')
    op.drop_table('ratings')
    op.drop_index('ix_stores_owner_id', table_name='stores')
    op.drop_table('stores')
    op.drop_table('users')
