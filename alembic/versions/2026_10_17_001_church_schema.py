"""Church schema: tenants, identities, profiles, members, leaders, appointments, events

Revision ID: 001_church_schema
Revises:
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa
import sqlmodel

# revision identifiers
revision = '001_church_schema'
down_revision = None

UUID = sqlmodel.sql.sqltypes.GUID()
user_role = sa.Enum('ADMIN', 'LEADER', 'MEMBER', name='userrole')
member_status = sa.Enum('ACTIVE', 'INACTIVE', name='memberstatus')
leader_type = sa.Enum('PASTOR', 'WORSHIP', 'YOUTH', 'CHILDREN', 'DEACON', 'PRESBYTER', name='leadertype')
appointment_status = sa.Enum('SCHEDULED', 'COMPLETED', 'CANCELLED', name='appointmentstatus')
payment_status = sa.Enum('PENDING', 'PAID', 'REFUNDED', name='paymentstatus')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'tenants',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(50), nullable=False),
        sa.Column('logo', sa.String(1000), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('website', sa.String(1000), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_tenants_name', 'tenants', ['name'])
    op.create_index('ix_tenants_slug', 'tenants', ['slug'], unique=True)

    op.create_table(
        'auth_identities',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('user_metadata', sa.JSON(), nullable=True),
        sa.Column('email_confirmed_at', sa.DateTime(), nullable=True),
        sa.Column('last_sign_in_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_auth_identities_email', 'auth_identities', ['email'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('id', UUID, sa.ForeignKey('auth_identities.id'), primary_key=True),
        sa.Column('tenant_id', UUID, sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('role', user_role, nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_profiles_tenant_id', 'profiles', ['tenant_id'])
    op.create_index('ix_profiles_email', 'profiles', ['email'])
    op.create_index('ix_profiles_role', 'profiles', ['role'])

    op.create_table(
        'members',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('tenant_id', UUID, sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('groups', sa.JSON(), nullable=True),
        sa.Column('status', member_status, nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_members_tenant_id', 'members', ['tenant_id'])
    op.create_index('ix_members_email', 'members', ['email'])
    op.create_index('ix_members_status', 'members', ['status'])
    op.create_index('ix_members_created_at', 'members', ['created_at'])

    op.create_table(
        'leaders',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('tenant_id', UUID, sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('user_id', UUID, sa.ForeignKey('auth_identities.id'), nullable=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('type', leader_type, nullable=False),
        sa.Column('permissions', sa.JSON(), nullable=True),
        sa.Column('is_available_for_appointments', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_leaders_tenant_id', 'leaders', ['tenant_id'])
    op.create_index('ix_leaders_email', 'leaders', ['email'])
    op.create_index('ix_leaders_type', 'leaders', ['type'])
    op.create_index('ix_leaders_is_available_for_appointments', 'leaders', ['is_available_for_appointments'])
    op.create_index('ix_leaders_created_at', 'leaders', ['created_at'])

    op.create_table(
        'appointments',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('tenant_id', UUID, sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('leader_id', UUID, sa.ForeignKey('leaders.id'), nullable=False),
        sa.Column('member_id', UUID, sa.ForeignKey('members.id'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('scheduled_at', sa.DateTime(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('status', appointment_status, nullable=False),
        sa.Column('visit_history', sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_appointments_tenant_id', 'appointments', ['tenant_id'])
    op.create_index('ix_appointments_leader_id', 'appointments', ['leader_id'])
    op.create_index('ix_appointments_member_id', 'appointments', ['member_id'])
    op.create_index('ix_appointments_scheduled_at', 'appointments', ['scheduled_at'])
    op.create_index('ix_appointments_status', 'appointments', ['status'])

    op.create_table(
        'events',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('tenant_id', UUID, sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('scheduled_at', sa.DateTime(), nullable=False),
        sa.Column('location', sa.String(500), nullable=False),
        sa.Column('banner', sa.String(1000), nullable=True),
        sa.Column('speakers', sa.JSON(), nullable=True),
        sa.Column('max_attendees', sa.Integer(), nullable=True),
        sa.Column('current_attendees', sa.Integer(), nullable=False),
        sa.Column('requires_payment', sa.Boolean(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_events_tenant_id', 'events', ['tenant_id'])
    op.create_index('ix_events_scheduled_at', 'events', ['scheduled_at'])
    op.create_index('ix_events_is_public', 'events', ['is_public'])

    op.create_table(
        'event_registrations',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('event_id', UUID, sa.ForeignKey('events.id'), nullable=False),
        sa.Column('attendee_name', sa.String(100), nullable=False),
        sa.Column('attendee_email', sa.String(255), nullable=False),
        sa.Column('attendee_phone', sa.String(50), nullable=False),
        sa.Column('payment_status', payment_status, nullable=True),
        sa.Column('registered_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_event_registrations_event_id', 'event_registrations', ['event_id'])


def downgrade():
    for table in (
        'event_registrations', 'events', 'appointments', 'leaders',
        'members', 'profiles', 'auth_identities', 'tenants',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in (payment_status, appointment_status, leader_type, member_status, user_role):
        enum.drop(bind, checkfirst=True)
