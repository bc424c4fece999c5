"""
create_habit_tracker_schema

Revision ID: 20251103_create_habit_tracker_schema
Revises:
Create Date: 2025-11-03 06:05:05.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20251103_create_habit_tracker_schema'
down_revision = None
branch_labels = None
depends_on = None


def _owner_column() -> sa.Column:
    return sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)


def _created_at() -> sa.Column:
    return sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('email', sa.String, unique=True, nullable=True),
        sa.Column('xp', sa.Integer, nullable=False, server_default='0'),
        sa.Column('level', sa.Integer, nullable=False, server_default='1'),
        sa.Column('current_streak', sa.Integer, nullable=False, server_default='0'),
        sa.Column('max_streak', sa.Integer, nullable=False, server_default='0'),
        sa.Column('dark_mode', sa.Boolean, nullable=False, server_default=sa.false()),
        _created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'habits',
        sa.Column('id', sa.Uuid, primary_key=True),
        _owner_column(),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('frequency', sa.String(20), nullable=False, server_default='Daily'),
        sa.Column('goal_value', sa.Integer, nullable=False, server_default='1'),
        sa.Column('unit', sa.String(50), nullable=False, server_default=''),
        sa.Column('is_boolean', sa.Boolean, nullable=False, server_default=sa.true()),
        _created_at(),
    )
    op.create_index('ix_habits_user_id', 'habits', ['user_id'])

    op.create_table(
        'habit_logs',
        sa.Column('id', sa.Uuid, primary_key=True),
        _owner_column(),
        sa.Column('habit_id', sa.Uuid, sa.ForeignKey('habits.id', ondelete='CASCADE'), nullable=False),
        sa.Column('completed', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('value', sa.Integer, nullable=False, server_default='0'),
        sa.Column('log_date', sa.Date, nullable=False),
        _created_at(),
        sa.UniqueConstraint('user_id', 'habit_id', 'log_date', name='uq_habit_logs_user_habit_date'),
    )
    op.create_index('ix_habit_logs_user_id', 'habit_logs', ['user_id'])
    op.create_index('ix_habit_logs_habit_id', 'habit_logs', ['habit_id'])
    op.create_index('ix_habit_logs_log_date', 'habit_logs', ['log_date'])

    op.create_table(
        'sleep_logs',
        sa.Column('id', sa.Uuid, primary_key=True),
        _owner_column(),
        sa.Column('bedtime', sa.String(5), nullable=False),
        sa.Column('wake_time', sa.String(5), nullable=False),
        sa.Column('quality', sa.Integer, nullable=False),
        sa.Column('total_hours', sa.Float, nullable=False),
        sa.Column('log_date', sa.Date, nullable=False),
        _created_at(),
        sa.CheckConstraint('quality >= 1 AND quality <= 5', name='ck_sleep_logs_quality'),
        sa.UniqueConstraint('user_id', 'log_date', name='uq_sleep_logs_user_date'),
    )
    op.create_index('ix_sleep_logs_user_id', 'sleep_logs', ['user_id'])
    op.create_index('ix_sleep_logs_log_date', 'sleep_logs', ['log_date'])

    op.create_table(
        'timetable_entries',
        sa.Column('id', sa.Uuid, primary_key=True),
        _owner_column(),
        sa.Column('course', sa.String(200), nullable=False),
        sa.Column('day', sa.String(10), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        _created_at(),
    )
    op.create_index('ix_timetable_entries_user_id', 'timetable_entries', ['user_id'])


def downgrade() -> None:
    op.drop_table('timetable_entries')
    op.drop_table('sleep_logs')
    op.drop_table('habit_logs')
    op.drop_table('habits')
    op.drop_table('users')
