"""initial_ledger_schema

Revision ID: 4c1e2a9b7d30
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '4c1e2a9b7d30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('display_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'daily_records',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('day_name', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('created_by', sa.String(100), nullable=False),
        sa.Column('last_modified_at', sa.DateTime(), nullable=True),
        sa.Column('last_modified_by', sa.String(100), nullable=True),
        sa.Column('petty_cash_computed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    # Not unique: duplicates per date are allowed once confirmed
    op.create_index(op.f('ix_daily_records_date'), 'daily_records', ['date'], unique=False)

    for table, key_column in (
        ('sales_data', 'category'),
        ('payment_methods', 'method'),
        ('summary_data', 'label'),
    ):
        columns = [
            sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
            sa.Column('record_id', postgresql.UUID(as_uuid=True), nullable=False),
            sa.Column(key_column, sa.String(40), nullable=False),
            sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        ]
        if table == 'summary_data':
            columns.append(
                sa.Column('is_calculated', sa.Boolean(), nullable=False, server_default='false')
            )
        op.create_table(
            table,
            *columns,
            sa.ForeignKeyConstraint(['record_id'], ['daily_records.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index(op.f(f'ix_{table}_record_id'), table, ['record_id'], unique=False)

    op.create_table(
        'audit_log',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('record_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('actor', sa.String(100), nullable=False),
        sa.Column('action', sa.String(20), nullable=False),
        sa.Column('changes', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['record_id'], ['daily_records.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_audit_log_record_id'), 'audit_log', ['record_id'], unique=False)
    op.create_index(op.f('ix_audit_log_created_at'), 'audit_log', ['created_at'], unique=False)

    op.create_table(
        'petty_cash_entries',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('amount > 0', name='petty_cash_amount_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_petty_cash_entries_date'), 'petty_cash_entries', ['date'], unique=False)
    op.create_index(
        op.f('ix_petty_cash_entries_category'), 'petty_cash_entries', ['category'], unique=False
    )

    op.create_table(
        'petty_cash_categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    # Seed default category
    op.execute(
        "INSERT INTO petty_cash_categories (id, name, created_at) "
        "VALUES (gen_random_uuid(), 'Payroll', now())"
    )

    op.create_table(
        'employees',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'employee_payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('employee_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('payment_type', sa.String(20), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('amount > 0', name='employee_payment_amount_positive'),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_employee_payments_employee_id'), 'employee_payments', ['employee_id'], unique=False
    )
    op.create_index(op.f('ix_employee_payments_date'), 'employee_payments', ['date'], unique=False)


def downgrade() -> None:
    op.drop_table('employee_payments')
    op.drop_table('employees')
    op.drop_table('petty_cash_categories')
    op.drop_table('petty_cash_entries')
    op.drop_table('audit_log')
    op.drop_table('summary_data')
    op.drop_table('payment_methods')
    op.drop_table('sales_data')
    op.drop_table('daily_records')
    op.drop_table('users')
