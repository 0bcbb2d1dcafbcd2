"""Create reservation, contract and payment schedule tables

Revision ID: 20261018_000001
Revises: None
Create Date: 2026-10-18

This migration creates the property catalog stub, reservations, contracts,
installment schedules, payment transactions and plan change audit tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261018_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    """Create the contract engine tables."""
    op.create_table(
        'property_info',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_title', sa.String(length=255), nullable=False),
        sa.Column('property_price', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'property_reservations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tracking_number', sa.String(length=20), nullable=True),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('reservation_fee', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('client_name', sa.String(length=200), nullable=False),
        sa.Column('client_email', sa.String(length=255), nullable=False),
        sa.Column('client_phone', sa.String(length=50), nullable=True),
        sa.Column('client_address', sa.String(length=500), nullable=True),
        sa.Column('occupation', sa.String(length=150), nullable=True),
        sa.Column('employer', sa.String(length=200), nullable=True),
        sa.Column('employment_status', sa.String(length=50), nullable=True),
        sa.Column('years_employed', sa.Integer(), nullable=True),
        sa.Column('monthly_income', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('other_income_source', sa.String(length=200), nullable=True),
        sa.Column('other_income_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('total_monthly_income', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending', 'approved', 'rejected', name='reservation_status', create_constraint=True),
            nullable=False,
            server_default='pending'
        ),
        sa.Column('rejection_reason', sa.String(length=500), nullable=True),
        sa.Column('status_changed_by', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['property_id'],
            ['property_info.id'],
            name='fk_property_reservations_property_id',
            ondelete='RESTRICT'
        ),
    )
    op.create_index(
        'ix_property_reservations_tracking_number', 'property_reservations', ['tracking_number'], unique=True
    )
    op.create_index('ix_property_reservations_property_id', 'property_reservations', ['property_id'])
    op.create_index('ix_property_reservations_status', 'property_reservations', ['status'])

    op.create_table(
        'property_contracts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('contract_number', sa.String(length=50), nullable=False),
        sa.Column('reservation_id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('client_name', sa.String(length=200), nullable=False),
        sa.Column('client_email', sa.String(length=255), nullable=False),
        sa.Column('total_contract_price', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('downpayment_percentage', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('downpayment_total', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('reservation_fee_paid', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('remaining_downpayment', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('bank_financing_percentage', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('bank_financing_amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('payment_plan_months', sa.Integer(), nullable=False),
        sa.Column('monthly_installment', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('total_paid_amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('remaining_balance', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column(
            'downpayment_status',
            sa.Enum('in_progress', 'completed', 'defaulted', name='downpayment_status', create_constraint=True),
            nullable=False,
            server_default='in_progress'
        ),
        sa.Column(
            'contract_status',
            sa.Enum('active', 'cancelled', name='contract_status', create_constraint=True),
            nullable=False,
            server_default='active'
        ),
        sa.Column('contract_signed_date', sa.DateTime(), nullable=False),
        sa.Column('first_installment_date', sa.Date(), nullable=False),
        sa.Column('final_installment_date', sa.Date(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('contract_number', name='uq_property_contracts_contract_number'),
        sa.UniqueConstraint('reservation_id', name='uq_property_contracts_reservation_id'),
        sa.ForeignKeyConstraint(
            ['reservation_id'],
            ['property_reservations.id'],
            name='fk_property_contracts_reservation_id',
            ondelete='RESTRICT'
        ),
        sa.ForeignKeyConstraint(
            ['property_id'],
            ['property_info.id'],
            name='fk_property_contracts_property_id',
        ),
    )
    op.create_index('ix_property_contracts_reservation_id', 'property_contracts', ['reservation_id'])
    op.create_index('ix_property_contracts_contract_status', 'property_contracts', ['contract_status'])

    op.create_table(
        'contract_payment_schedules',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('contract_id', sa.Integer(), nullable=False),
        sa.Column('installment_number', sa.Integer(), nullable=False),
        sa.Column('installment_description', sa.String(length=100), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('grace_period_end_date', sa.Date(), nullable=False),
        sa.Column('scheduled_amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('paid_amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('remaining_amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('penalty_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'payment_status',
            sa.Enum('pending', 'paid', 'overdue', name='schedule_payment_status', create_constraint=True),
            nullable=False,
            server_default='pending'
        ),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'contract_id', 'installment_number', name='uq_contract_payment_schedules_installment'
        ),
        sa.ForeignKeyConstraint(
            ['contract_id'],
            ['property_contracts.id'],
            name='fk_contract_payment_schedules_contract_id',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_contract_payment_schedules_contract_id', 'contract_payment_schedules', ['contract_id'])
    op.create_index('ix_contract_payment_schedules_due_date', 'contract_payment_schedules', ['due_date'])
    op.create_index(
        'ix_contract_payment_schedules_payment_status', 'contract_payment_schedules', ['payment_status']
    )

    op.create_table(
        'contract_payment_transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('contract_id', sa.Integer(), nullable=False),
        sa.Column('schedule_id', sa.Integer(), nullable=True),
        sa.Column('amount_paid', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('penalty_paid', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_type', sa.String(length=20), nullable=False),
        sa.Column('payment_method', sa.String(length=30), nullable=False),
        sa.Column('reference_number', sa.String(length=100), nullable=True),
        sa.Column('receipt_number', sa.String(length=50), nullable=False),
        sa.Column('processed_by', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column(
            'transaction_status',
            sa.Enum('completed', 'reverted', name='transaction_status', create_constraint=True),
            nullable=False,
            server_default='completed'
        ),
        sa.Column('transaction_date', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['contract_id'],
            ['property_contracts.id'],
            name='fk_contract_payment_transactions_contract_id',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['schedule_id'],
            ['contract_payment_schedules.id'],
            name='fk_contract_payment_transactions_schedule_id',
            ondelete='SET NULL'
        ),
    )
    op.create_index(
        'ix_contract_payment_transactions_contract_id', 'contract_payment_transactions', ['contract_id']
    )
    op.create_index(
        'ix_contract_payment_transactions_schedule_id', 'contract_payment_transactions', ['schedule_id']
    )

    op.create_table(
        'plan_changes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('contract_id', sa.Integer(), nullable=False),
        sa.Column('old_payment_plan_months', sa.Integer(), nullable=False),
        sa.Column('new_payment_plan_months', sa.Integer(), nullable=False),
        sa.Column('old_monthly_installment', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('new_monthly_installment', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('old_final_installment_date', sa.Date(), nullable=True),
        sa.Column('new_final_installment_date', sa.Date(), nullable=True),
        sa.Column('reason', sa.String(length=500), nullable=False),
        sa.Column('changed_by', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['contract_id'],
            ['property_contracts.id'],
            name='fk_plan_changes_contract_id',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_plan_changes_contract_id', 'plan_changes', ['contract_id'])


def downgrade() -> None:
    """Drop the contract engine tables."""
    op.drop_index('ix_plan_changes_contract_id', table_name='plan_changes')
    op.drop_table('plan_changes')
    op.drop_index('ix_contract_payment_transactions_schedule_id', table_name='contract_payment_transactions')
    op.drop_index('ix_contract_payment_transactions_contract_id', table_name='contract_payment_transactions')
    op.drop_table('contract_payment_transactions')
    op.drop_index('ix_contract_payment_schedules_payment_status', table_name='contract_payment_schedules')
    op.drop_index('ix_contract_payment_schedules_due_date', table_name='contract_payment_schedules')
    op.drop_index('ix_contract_payment_schedules_contract_id', table_name='contract_payment_schedules')
    op.drop_table('contract_payment_schedules')
    op.drop_index('ix_property_contracts_contract_status', table_name='property_contracts')
    op.drop_index('ix_property_contracts_reservation_id', table_name='property_contracts')
    op.drop_table('property_contracts')
    op.drop_index('ix_property_reservations_status', table_name='property_reservations')
    op.drop_index('ix_property_reservations_property_id', table_name='property_reservations')
    op.drop_index('ix_property_reservations_tracking_number', table_name='property_reservations')
    op.drop_table('property_reservations')
    op.drop_table('property_info')

    # Drop the enum types
    if op.get_bind().dialect.name == "postgresql":
        for enum_name in ('transaction_status', 'schedule_payment_status', 'contract_status',
                          'downpayment_status', 'reservation_status'):
            op.execute(f"DROP TYPE IF EXISTS {enum_name}")
