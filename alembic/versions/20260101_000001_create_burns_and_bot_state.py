"""create burns and bot_state tables

Revision ID: 20260101_000001
Revises: 
Create Date: 2026-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20260101_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create burns and bot_state tables."""
    op.create_table(
        'burns',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('tx_hash', sa.String(66), nullable=False),
        sa.Column('block_number', sa.BigInteger(), nullable=False),
        sa.Column('timestamp', sa.BigInteger(), nullable=False),
        sa.Column('amount', sa.Text(), nullable=False),
        sa.Column('amount_raw', sa.Text(), nullable=False),
        sa.Column('initiator', sa.String(42), nullable=False),
        sa.Column('transfer_from', sa.String(42), nullable=True),
        sa.Column('destination', sa.String(20), nullable=False),
        sa.Column('notified_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('gas_used', sa.Text(), nullable=True),
        sa.Column('gas_price', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    # Indexes
    op.create_index('ix_burns_tx_hash', 'burns', ['tx_hash'], unique=True)
    op.create_index('ix_burns_block_number', 'burns', ['block_number'])
    op.create_index('ix_burns_timestamp', 'burns', ['timestamp'])
    op.create_index('ix_burns_initiator', 'burns', ['initiator'])

    op.create_table(
        'bot_state',
        sa.Column('key', sa.String(255), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade() -> None:
    """Drop burns and bot_state tables."""
    op.drop_table('bot_state')
    op.drop_index('ix_burns_initiator', table_name='burns')
    op.drop_index('ix_burns_timestamp', table_name='burns')
    op.drop_index('ix_burns_block_number', table_name='burns')
    op.drop_index('ix_burns_tx_hash', table_name='burns')
    op.drop_table('burns')
