"""create_samity_tables

Revision ID: 0001_create_samity_tables
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_create_samity_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'member',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('current_loan_principal', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_savings', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('joined_date', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_member_seq', 'member', ['seq'], unique=True)

    op.create_table(
        'ledger_transaction',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        # Stored as plain strings (native_enum=False on the model)
        sa.Column('type', sa.Enum('Deposit', 'LoanTaken', 'LoanRepayment', 'InterestPaid', name='transactiontype', native_enum=False), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.CheckConstraint('amount > 0', name='ck_ledger_transaction_amount_positive'),
        sa.ForeignKeyConstraint(['member_id'], ['member.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_ledger_transaction_seq', 'ledger_transaction', ['seq'], unique=True)
    op.create_index('ix_ledger_transaction_member_id', 'ledger_transaction', ['member_id'], unique=False)
    op.create_index('ix_ledger_transaction_date', 'ledger_transaction', ['date'], unique=False)

    op.create_table(
        'samity_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('interest_rate', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('monthly_savings_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    op.drop_table('samity_settings')
    op.drop_index('ix_ledger_transaction_date', table_name='ledger_transaction')
    op.drop_index('ix_ledger_transaction_member_id', table_name='ledger_transaction')
    op.drop_index('ix_ledger_transaction_seq', table_name='ledger_transaction')
    op.drop_table('ledger_transaction')
    op.drop_index('ix_member_seq', table_name='member')
    op.drop_table('member')
