"""create_seats_and_accounts

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Schema:
- seats: the contended demo seat (available -> reserving -> booked)
- accounts: two demo accounts for the atomic transfer

Seed:
- seat A1 available, price 25.00
- Virat 200.00, Rohit 10.00

No CHECK constraint on accounts.balance: the transfer refuses to overdraw
on its own.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    seats = op.create_table(
        'seats',
        sa.Column('seat_id', sa.String(length=10), primary_key=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='available'),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('booked_by', sa.String(length=50), nullable=True),
        sa.Column('reserved_by', sa.String(length=50), nullable=True),
        sa.Column('booked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reserved_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('available', 'reserving', 'booked')", name='ck_seats_status'
        ),
    )

    accounts = op.create_table(
        'accounts',
        sa.Column('account_id', sa.String(length=50), primary_key=True),
        sa.Column('balance', sa.Numeric(12, 2), nullable=False),
    )

    op.bulk_insert(seats, [{'seat_id': 'A1', 'status': 'available', 'price': 25.00}])
    op.bulk_insert(
        accounts,
        [
            {'account_id': 'Virat', 'balance': 200.00},
            {'account_id': 'Rohit', 'balance': 10.00},
        ],
    )


def downgrade() -> None:
    op.drop_table('accounts')
    op.drop_table('seats')
