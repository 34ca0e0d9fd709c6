"""Initial volunteer activity schema

Revision ID: 000
Revises:
Create Date: 2026-10-19 10:00:00.000000

Creates the tables read by the reporting engine: profiles, events, shifts,
volunteer assignments, hour logs and volunteer groups with memberships.
For new installations, run: alembic upgrade head
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '000'
down_revision = None
branch_labels = None
depends_on = None

assignment_status = sa.Enum(
    'registered', 'checked_in', 'completed', 'no_show',
    name='assignmentstatus'
)


def upgrade():
    """Create volunteer activity tables."""

    # 1. profiles
    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'])
    op.create_index('ix_profiles_role', 'profiles', ['role'])

    # 2. events
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_events_title', 'events', ['title'])
    op.create_index('ix_events_start_date', 'events', ['start_date'])

    # 3. shifts
    op.create_table(
        'shifts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.CheckConstraint('end_time > start_time', name='ck_shifts_end_after_start'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_shifts_event_id', 'shifts', ['event_id'])

    # 4. volunteer_assignments
    op.create_table(
        'volunteer_assignments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('volunteer_id', sa.Integer(), nullable=False),
        sa.Column('shift_id', sa.Integer(), nullable=False),
        sa.Column('status', assignment_status, nullable=False, server_default='registered'),
        sa.Column('hours_logged', sa.Numeric(precision=6, scale=2), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['volunteer_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['shift_id'], ['shifts.id'], ondelete='CASCADE'),
        sa.CheckConstraint('hours_logged IS NULL OR hours_logged >= 0', name='ck_assignments_hours_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_volunteer_assignments_volunteer_id', 'volunteer_assignments', ['volunteer_id'])
    op.create_index('ix_volunteer_assignments_shift_id', 'volunteer_assignments', ['shift_id'])
    op.create_index('ix_volunteer_assignments_status', 'volunteer_assignments', ['status'])
    op.create_index('ix_volunteer_assignments_created_at', 'volunteer_assignments', ['created_at'])

    # 5. hour_logs
    op.create_table(
        'hour_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('volunteer_id', sa.Integer(), nullable=False),
        sa.Column('hours', sa.Numeric(precision=6, scale=2), nullable=False),
        sa.Column('log_date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['volunteer_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.CheckConstraint('hours >= 0', name='ck_hour_logs_hours_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_hour_logs_volunteer_id', 'hour_logs', ['volunteer_id'])
    op.create_index('ix_hour_logs_log_date', 'hour_logs', ['log_date'])
    op.create_index('ix_hour_logs_verified_at', 'hour_logs', ['verified_at'])

    # 6. volunteer_groups
    op.create_table(
        'volunteer_groups',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_volunteer_groups_name', 'volunteer_groups', ['name'])

    # 7. volunteer_group_memberships
    op.create_table(
        'volunteer_group_memberships',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('volunteer_id', sa.Integer(), nullable=False),
        sa.Column('group_id', sa.Integer(), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['volunteer_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['group_id'], ['volunteer_groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('volunteer_id', 'group_id'),
    )
    op.create_index('ix_volunteer_group_memberships_volunteer_id', 'volunteer_group_memberships', ['volunteer_id'])
    op.create_index('ix_volunteer_group_memberships_group_id', 'volunteer_group_memberships', ['group_id'])


def downgrade():
    """Drop volunteer activity tables."""
    op.drop_table('volunteer_group_memberships')
    op.drop_table('volunteer_groups')
    op.drop_table('hour_logs')
    op.drop_table('volunteer_assignments')
    op.drop_table('shifts')
    op.drop_table('events')
    op.drop_table('profiles')
    assignment_status.drop(op.get_bind(), checkfirst=True)
