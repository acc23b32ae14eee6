"""create users, request types, approval requests and history

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(200), nullable=True),
        sa.UniqueConstraint('username', name='uq_users_username'),
    )
    op.create_table(
        'request_types',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        sa.UniqueConstraint('name', name='uq_request_types_name'),
    )
    op.create_table(
        'approval_requests',
        sa.Column('seq', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('requester_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('approver_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('request_type_id', sa.Integer(), sa.ForeignKey('request_types.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('id', name='uq_approval_requests_id'),
    )
    op.create_index('ix_approval_requests_requester_created', 'approval_requests', ['requester_id', 'created_at'])
    op.create_index('ix_approval_requests_approver_created', 'approval_requests', ['approver_id', 'created_at'])
    op.create_table(
        'approval_history',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('action_taken', sa.String(100), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('action_date', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('request_id', sa.String(36), sa.ForeignKey('approval_requests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
    )
    op.create_index('ix_approval_history_request_action_date', 'approval_history', ['request_id', 'action_date'])


def downgrade() -> None:
    op.drop_index('ix_approval_history_request_action_date', table_name='approval_history')
    op.drop_table('approval_history')
    op.drop_index('ix_approval_requests_approver_created', table_name='approval_requests')
    op.drop_index('ix_approval_requests_requester_created', table_name='approval_requests')
    op.drop_table('approval_requests')
    op.drop_table('request_types')
    op.drop_table('users')
