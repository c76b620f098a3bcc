"""Initial schema: users, properties, tenants, maintenance, payments, documents

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
from geoalchemy2 import Geography
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    if op.get_bind().dialect.name == 'postgresql':
        op.execute('CREATE EXTENSION IF NOT EXISTS postgis')

    # Users
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(32), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(30), nullable=False),
        sa.Column('avatar_url', sa.String(500), nullable=True),
        sa.Column('address', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    # Properties
    op.create_table(
        'properties',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('property_code', sa.String(64), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('property_type', sa.String(32), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('street', sa.String(255), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('zip_code', sa.String(20), nullable=False),
        sa.Column('country', sa.String(100), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column(
            'location',
            sa.String(100).with_variant(
                Geography(geometry_type='POINT', srid=4326, spatial_index=False), 'postgresql'
            ),
            nullable=True,
        ),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('manager_id', sa.Uuid(), nullable=True),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('amenities', sa.JSON(), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('floor_plan', sa.String(500), nullable=True),
        sa.Column('virtual_tour', sa.String(500), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Float(), nullable=False),
        sa.Column('square_feet', sa.Integer(), nullable=False),
        sa.Column('year_built', sa.Integer(), nullable=False),
        sa.Column('lot_size', sa.Float(), nullable=True),
        sa.Column('parking_spaces', sa.Integer(), nullable=True),
        sa.Column('furnished', sa.Boolean(), nullable=False),
        sa.Column('pets_allowed', sa.Boolean(), nullable=False),
        sa.Column('smoking_allowed', sa.Boolean(), nullable=False),
        sa.Column('purchase_price', sa.Float(), nullable=True),
        sa.Column('current_value', sa.Float(), nullable=True),
        sa.Column('monthly_rent', sa.Float(), nullable=False),
        sa.Column('security_deposit', sa.Float(), nullable=False),
        sa.Column('application_fee', sa.Float(), nullable=True),
        sa.Column('pet_deposit', sa.Float(), nullable=True),
        sa.Column('utilities', sa.JSON(), nullable=False),
        sa.Column('property_tax', sa.Float(), nullable=True),
        sa.Column('insurance', sa.Float(), nullable=True),
        sa.Column('hoa', sa.Float(), nullable=True),
        sa.Column('management_fee', sa.Float(), nullable=True),
        sa.Column('lease', sa.JSON(), nullable=True),
        sa.Column('last_inspection', sa.DateTime(), nullable=True),
        sa.Column('next_inspection', sa.DateTime(), nullable=True),
        sa.Column('maintenance_schedule', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('metrics', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id']),
        sa.ForeignKeyConstraint(['manager_id'], ['users.id']),
    )
    op.create_index('ix_properties_property_code', 'properties', ['property_code'], unique=True)
    op.create_index('ix_properties_property_type', 'properties', ['property_type'])
    op.create_index('ix_properties_status', 'properties', ['status'])
    op.create_index('ix_properties_city', 'properties', ['city'])
    op.create_index('ix_properties_owner_id', 'properties', ['owner_id'])
    op.create_index('ix_properties_bedrooms', 'properties', ['bedrooms'])
    op.create_index('ix_properties_monthly_rent', 'properties', ['monthly_rent'])
    op.create_index('ix_properties_lat_lng', 'properties', ['latitude', 'longitude'])
    op.create_index('idx_properties_location', 'properties', ['location'], postgresql_using='gist')

    op.create_table(
        'user_properties',
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint('user_id', 'property_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
    )

    # Tenants
    op.create_table(
        'tenants',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=True),
        sa.Column('lease_start', sa.DateTime(), nullable=False),
        sa.Column('lease_end', sa.DateTime(), nullable=False),
        sa.Column('monthly_rent', sa.Float(), nullable=False),
        sa.Column('security_deposit', sa.Float(), nullable=False),
        sa.Column('deposit_paid', sa.Boolean(), nullable=False),
        sa.Column('emergency_contact', sa.JSON(), nullable=False),
        sa.Column('employment', sa.JSON(), nullable=True),
        sa.Column('references', sa.JSON(), nullable=False),
        sa.Column('vehicles', sa.JSON(), nullable=False),
        sa.Column('pets', sa.JSON(), nullable=False),
        sa.Column('background', sa.JSON(), nullable=True),
        sa.Column('payment_history', sa.JSON(), nullable=False),
        sa.Column('documents', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('move_in_date', sa.DateTime(), nullable=True),
        sa.Column('move_out_date', sa.DateTime(), nullable=True),
        sa.Column('move_in_condition', sa.Text(), nullable=True),
        sa.Column('move_out_condition', sa.Text(), nullable=True),
        sa.Column('balance', sa.Float(), nullable=False),
        sa.Column('auto_pay_enabled', sa.Boolean(), nullable=False),
        sa.Column('preferred_contact_method', sa.String(32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_tenants_user_id', 'tenants', ['user_id'])
    op.create_index('ix_tenants_property_id', 'tenants', ['property_id'])
    op.create_index('ix_tenants_status', 'tenants', ['status'])
    op.create_index(
        'uq_tenants_active_property', 'tenants', ['property_id'], unique=True,
        sqlite_where=sa.text("status = 'active'"),
        postgresql_where=sa.text("status = 'active'"),
    )

    # Maintenance requests
    op.create_table(
        'maintenance_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('ticket_id', sa.String(64), nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=True),
        sa.Column('tenant_id', sa.Uuid(), nullable=True),
        sa.Column('reported_by_id', sa.Uuid(), nullable=False),
        sa.Column('assigned_to_id', sa.Uuid(), nullable=True),
        sa.Column('category', sa.String(32), nullable=False),
        sa.Column('priority', sa.String(32), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('scheduled_date', sa.DateTime(), nullable=True),
        sa.Column('completed_date', sa.DateTime(), nullable=True),
        sa.Column('estimated_cost', sa.Float(), nullable=True),
        sa.Column('actual_cost', sa.Float(), nullable=True),
        sa.Column('vendor', sa.JSON(), nullable=True),
        sa.Column('notes', sa.JSON(), nullable=False),
        sa.Column('timeline', sa.JSON(), nullable=False),
        sa.Column('materials', sa.JSON(), nullable=False),
        sa.Column('labor_hours', sa.Float(), nullable=True),
        sa.Column('recurring_schedule', sa.JSON(), nullable=True),
        sa.Column('satisfaction', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['reported_by_id'], ['users.id']),
        sa.ForeignKeyConstraint(['assigned_to_id'], ['users.id']),
    )
    op.create_index('ix_maintenance_requests_ticket_id', 'maintenance_requests', ['ticket_id'], unique=True)
    op.create_index('ix_maintenance_requests_property_id', 'maintenance_requests', ['property_id'])
    op.create_index('ix_maintenance_requests_reported_by_id', 'maintenance_requests', ['reported_by_id'])
    op.create_index('ix_maintenance_requests_category', 'maintenance_requests', ['category'])
    op.create_index('ix_maintenance_requests_priority', 'maintenance_requests', ['priority'])
    op.create_index('ix_maintenance_requests_status', 'maintenance_requests', ['status'])

    # Payments
    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('payment_code', sa.String(64), nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=True),
        sa.Column('tenant_id', sa.Uuid(), nullable=False),
        sa.Column('payment_type', sa.String(32), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('due_date', sa.DateTime(), nullable=False),
        sa.Column('paid_date', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('method', sa.String(32), nullable=True),
        sa.Column('transaction_id', sa.String(255), nullable=True),
        sa.Column('processing_fee', sa.Float(), nullable=True),
        sa.Column('late_fee', sa.Float(), nullable=True),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('invoice', sa.JSON(), nullable=True),
        sa.Column('receipt', sa.JSON(), nullable=True),
        sa.Column('bank_details', sa.JSON(), nullable=True),
        sa.Column('card_details', sa.JSON(), nullable=True),
        sa.Column('recurring', sa.JSON(), nullable=True),
        sa.Column('split_payment', sa.JSON(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('reminders', sa.JSON(), nullable=False),
        sa.Column('disputes', sa.JSON(), nullable=False),
        sa.Column('created_by_id', sa.Uuid(), nullable=False),
        sa.Column('updated_by_id', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id']),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id']),
        sa.ForeignKeyConstraint(['updated_by_id'], ['users.id']),
    )
    op.create_index('ix_payments_payment_code', 'payments', ['payment_code'], unique=True)
    op.create_index('ix_payments_property_id', 'payments', ['property_id'])
    op.create_index('ix_payments_tenant_id', 'payments', ['tenant_id'])
    op.create_index('ix_payments_payment_type', 'payments', ['payment_type'])
    op.create_index('ix_payments_due_date', 'payments', ['due_date'])
    op.create_index('ix_payments_status', 'payments', ['status'])

    # Documents
    op.create_table(
        'documents',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('document_code', sa.String(64), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('document_type', sa.String(32), nullable=False),
        sa.Column('category', sa.String(32), nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=True),
        sa.Column('tenant_id', sa.Uuid(), nullable=True),
        sa.Column('uploaded_by_id', sa.Uuid(), nullable=False),
        sa.Column('file_url', sa.String(1000), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('mime_type', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('previous_versions', sa.JSON(), nullable=False),
        sa.Column('expiry_date', sa.DateTime(), nullable=True),
        sa.Column('reminder_date', sa.DateTime(), nullable=True),
        sa.Column('is_confidential', sa.Boolean(), nullable=False),
        sa.Column('access_control', sa.JSON(), nullable=False),
        sa.Column('signatures', sa.JSON(), nullable=False),
        sa.Column('audit', sa.JSON(), nullable=False),
        sa.Column('is_archived', sa.Boolean(), nullable=False),
        sa.Column('archived_date', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['uploaded_by_id'], ['users.id']),
    )
    op.create_index('ix_documents_document_code', 'documents', ['document_code'], unique=True)
    op.create_index('ix_documents_document_type', 'documents', ['document_type'])
    op.create_index('ix_documents_category', 'documents', ['category'])
    op.create_index('ix_documents_property_id', 'documents', ['property_id'])
    op.create_index('ix_documents_tenant_id', 'documents', ['tenant_id'])
    op.create_index('ix_documents_is_archived', 'documents', ['is_archived'])


def downgrade() -> None:
    op.drop_table('documents')
    op.drop_table('payments')
    op.drop_table('maintenance_requests')
    op.drop_table('tenants')
    op.drop_table('user_properties')
    op.drop_table('properties')
    op.drop_table('users')
