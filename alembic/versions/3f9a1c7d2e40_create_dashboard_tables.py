"""Create users, activity_logs and daily_metrics

Revision ID: 3f9a1c7d2e40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c7d2e40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.Text(), nullable=False, unique=True),
        sa.Column('password', sa.Text(), nullable=False),
        sa.Column('session_token', sa.Text(), nullable=True),
        sa.Column('last_seen', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_online', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('action', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_activity_logs_user_id', 'activity_logs', ['user_id'])

    counter = dict(server_default='0')
    op.create_table(
        'daily_metrics',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('team_name', sa.Text(), nullable=False),
        sa.Column('record_date', sa.Date(), nullable=False),
        sa.Column('planned_inquiries', sa.Integer(), **counter),
        sa.Column('total_inquiries', sa.Integer(), **counter),
        sa.Column('wasted_inquiries', sa.Integer(), **counter),
        sa.Column('net_inquiries', sa.Integer(), **counter),
        sa.Column('planned_daily_spend', sa.Numeric(12, 2), **counter),
        sa.Column('actual_spend', sa.Numeric(12, 2), **counter),
        sa.Column('deposits_count', sa.Integer(), **counter),
        sa.Column('silent_inquiries', sa.Integer(), **counter),
        sa.Column('repeat_inquiries', sa.Integer(), **counter),
        sa.Column('existing_user_inquiries', sa.Integer(), **counter),
        sa.Column('spam_inquiries', sa.Integer(), **counter),
        sa.Column('blocked_inquiries', sa.Integer(), **counter),
        sa.Column('under_18_inquiries', sa.Integer(), **counter),
        sa.Column('over_50_inquiries', sa.Integer(), **counter),
        sa.Column('foreigner_inquiries', sa.Integer(), **counter),
        sa.Column('new_player_value_thb', sa.Numeric(14, 2), **counter),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('team_name', 'record_date', name='uq_daily_metric_team_date'),
    )
    op.create_index('ix_daily_metrics_record_date', 'daily_metrics', ['record_date'])


def downgrade() -> None:
    op.drop_index('ix_daily_metrics_record_date', table_name='daily_metrics')
    op.drop_table('daily_metrics')
    op.drop_index('ix_activity_logs_user_id', table_name='activity_logs')
    op.drop_table('activity_logs')
    op.drop_table('users')
