"""Create maintenance schedule, request, log and notification tables

Revision ID: 20261018_000001
Revises: None
Create Date: 2026-10-18

Adds leases.status (only ACTIVE leases make a unit occupied), turns
property_units.floor into an integer so floor targeting can match on it,
and creates the four maintenance tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261018_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


CATEGORIES = ('PLUMBING', 'ELECTRICAL', 'HVAC', 'APPLIANCE', 'STRUCTURAL', 'CLEANING', 'OTHER')
PRIORITIES = ('LOW', 'MEDIUM', 'HIGH', 'URGENT')


def upgrade() -> None:
    """Create the maintenance tables."""
    op.add_column(
        'leases',
        sa.Column(
            'status',
            sa.Enum('PENDING', 'ACTIVE', 'EXPIRED', 'TERMINATED', name='lease_status'),
            nullable=False,
            server_default='ACTIVE'
        ),
    )
    op.create_index('ix_leases_status', 'leases', ['status'])
    op.create_index('ix_leases_property_unit_id', 'leases', ['property_unit_id'])

    op.alter_column(
        'property_units',
        'floor',
        existing_type=sa.String(length=20),
        type_=sa.Integer(),
        existing_nullable=True,
    )
    op.create_index('ix_property_units_floor', 'property_units', ['floor'])
    op.create_index('ix_property_units_unit_type', 'property_units', ['unit_type'])

    op.create_table(
        'maintenance_schedules',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.Enum(*CATEGORIES, name='maintenance_category'), nullable=False, server_default='OTHER'),
        sa.Column(
            'recurrence_type',
            sa.Enum('ONE_TIME', 'DAILY', 'WEEKLY', 'MONTHLY', 'QUARTERLY', 'YEARLY', name='recurrence_type'),
            nullable=False,
            server_default='ONE_TIME'
        ),
        sa.Column('recurrence_interval', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('recurrence_day_of_week', sa.Integer(), nullable=True),
        sa.Column('recurrence_day_of_month', sa.Integer(), nullable=True),
        sa.Column(
            'target_type',
            sa.Enum('ALL_UNITS', 'SPECIFIC_UNITS', 'FLOOR', 'UNIT_TYPE', name='target_type'),
            nullable=False,
            server_default='ALL_UNITS'
        ),
        sa.Column('target_units', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('next_trigger_date', sa.Date(), nullable=False),
        sa.Column('last_triggered_date', sa.Date(), nullable=True),
        sa.Column('notify_days_before', sa.Integer(), nullable=True, server_default='3'),
        sa.Column('notify_users', sa.Text(), nullable=True),
        sa.Column('estimated_cost', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('assigned_to_user_id', sa.Integer(), nullable=True),
        sa.Column('priority', sa.Enum(*PRIORITIES, name='maintenance_priority'), nullable=False, server_default='MEDIUM'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_paused', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_by_user_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['assigned_to_user_id'], ['users.id'], name='fk_maintenance_schedules_assigned_to'),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['users.id'], name='fk_maintenance_schedules_created_by'),
    )
    op.create_index('ix_maintenance_schedules_next_trigger_date', 'maintenance_schedules', ['next_trigger_date'])
    op.create_index('ix_maintenance_schedules_is_active', 'maintenance_schedules', ['is_active'])

    op.create_table(
        'maintenance_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.Column('unit_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.Enum(*CATEGORIES, name='maintenance_request_category'), nullable=False, server_default='OTHER'),
        sa.Column('priority', sa.Enum(*PRIORITIES, name='maintenance_request_priority'), nullable=False, server_default='MEDIUM'),
        sa.Column(
            'urgency',
            sa.Enum('LOW', 'MEDIUM', 'HIGH', 'EMERGENCY', name='maintenance_urgency'),
            nullable=False,
            server_default='MEDIUM'
        ),
        sa.Column('preferred_time', sa.String(length=100), nullable=True),
        sa.Column(
            'status',
            sa.Enum(
                'NOT_SUBMITTED', 'PENDING_TENANT_CONFIRMATION', 'SUBMITTED', 'WAITING_FOR_REPAIR',
                'APPROVED', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED',
                name='maintenance_request_status'
            ),
            nullable=False,
            server_default='SUBMITTED'
        ),
        sa.Column('assigned_to_user_id', sa.Integer(), nullable=True),
        sa.Column('estimated_cost', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('actual_cost', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('completion_notes', sa.Text(), nullable=True),
        sa.Column('submitted_date', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('completed_date', sa.DateTime(), nullable=True),
        sa.Column('created_by_user_id', sa.Integer(), nullable=True),
        sa.Column('updated_by_user_id', sa.Integer(), nullable=True),
        sa.Column('schedule_id', sa.Integer(), nullable=True),
        sa.Column('is_from_schedule', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_maintenance_requests_tenant_id', 'maintenance_requests', ['tenant_id'])
    op.create_index('ix_maintenance_requests_unit_id', 'maintenance_requests', ['unit_id'])
    op.create_index('ix_maintenance_requests_status', 'maintenance_requests', ['status'])
    op.create_index('ix_maintenance_requests_schedule_id', 'maintenance_requests', ['schedule_id'])

    op.create_table(
        'maintenance_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('schedule_id', sa.Integer(), nullable=True),
        sa.Column('schedule_title', sa.String(length=200), nullable=True),
        sa.Column('request_id', sa.Integer(), nullable=True),
        sa.Column(
            'action_type',
            sa.Enum(
                'SCHEDULE_CREATED', 'SCHEDULE_UPDATED', 'SCHEDULE_DELETED', 'SCHEDULE_ACTIVATED',
                'SCHEDULE_DEACTIVATED', 'SCHEDULE_PAUSED', 'SCHEDULE_RESUMED', 'SCHEDULE_TRIGGERED',
                'REQUEST_CREATED_FROM_SCHEDULE', 'REQUEST_STATUS_CHANGED', 'NOTIFICATION_SENT',
                name='maintenance_log_action'
            ),
            nullable=False
        ),
        sa.Column('action_description', sa.Text(), nullable=True),
        sa.Column('field_name', sa.String(length=100), nullable=True),
        sa.Column('previous_value', sa.Text(), nullable=True),
        sa.Column('new_value', sa.Text(), nullable=True),
        sa.Column('created_by_user_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['schedule_id'],
            ['maintenance_schedules.id'],
            name='fk_maintenance_logs_schedule_id',
            ondelete='SET NULL'
        ),
    )
    op.create_index('ix_maintenance_logs_schedule_id', 'maintenance_logs', ['schedule_id'])
    op.create_index('ix_maintenance_logs_request_id', 'maintenance_logs', ['request_id'])

    op.create_table(
        'maintenance_notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column(
            'notification_type',
            sa.Enum(
                'UPCOMING_MAINTENANCE', 'OVERDUE', 'STATUS_CHANGE', 'COMPLETED',
                'SCHEDULE_REMINDER', 'ASSIGNED', 'GENERAL',
                name='maintenance_notification_type'
            ),
            nullable=False
        ),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('schedule_id', sa.Integer(), nullable=True),
        sa.Column('request_id', sa.Integer(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['user_id'],
            ['users.id'],
            name='fk_maintenance_notifications_user_id',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['schedule_id'],
            ['maintenance_schedules.id'],
            name='fk_maintenance_notifications_schedule_id',
            ondelete='SET NULL'
        ),
    )
    op.create_index('ix_maintenance_notifications_user_id', 'maintenance_notifications', ['user_id'])
    op.create_index('ix_maintenance_notifications_schedule_id', 'maintenance_notifications', ['schedule_id'])
    op.create_index('ix_maintenance_notifications_request_id', 'maintenance_notifications', ['request_id'])


def downgrade() -> None:
    """Drop the maintenance tables and the columns added above."""
    op.drop_table('maintenance_notifications')
    op.drop_table('maintenance_logs')
    op.drop_table('maintenance_requests')
    op.drop_table('maintenance_schedules')

    op.drop_index('ix_property_units_unit_type', table_name='property_units')
    op.drop_index('ix_property_units_floor', table_name='property_units')
    op.alter_column(
        'property_units',
        'floor',
        existing_type=sa.Integer(),
        type_=sa.String(length=20),
        existing_nullable=True,
    )

    op.drop_index('ix_leases_property_unit_id', table_name='leases')
    op.drop_index('ix_leases_status', table_name='leases')
    op.drop_column('leases', 'status')
