"""Widen ledger balances and add daily reward columns

Revision ID: 8c5e2b7a41d3
Revises: 3f2a9c1d7e40
Create Date: 2025-11-19 09:12:44.803117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c5e2b7a41d3'
down_revision: Union[str, Sequence[str], None] = '3f2a9c1d7e40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LEDGER_COLUMNS = ('gold', 'gems', 'metals', 'quartz')


def upgrade() -> None:
    """Upgrade schema."""
    # SQLite INTEGER is already 64-bit; only other backends need the wider type
    if op.get_bind().dialect.name != 'sqlite':
        for column in LEDGER_COLUMNS:
            op.alter_column(
                'players',
                column,
                existing_type=sa.Integer(),
                type_=sa.BigInteger(),
                existing_nullable=False,
            )
    op.add_column(
        'players', sa.Column('mana', sa.Integer(), server_default='50', nullable=False)
    )
    op.add_column(
        'players', sa.Column('max_mana', sa.Integer(), server_default='50', nullable=False)
    )
    op.add_column(
        'daily_purchases',
        sa.Column('gold_delta', sa.BigInteger(), server_default='0', nullable=False),
    )


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table('daily_purchases') as batch_op:
        batch_op.drop_column('gold_delta')
    with op.batch_alter_table('players') as batch_op:
        batch_op.drop_column('max_mana')
        batch_op.drop_column('mana')
    if op.get_bind().dialect.name != 'sqlite':
        for column in LEDGER_COLUMNS:
            op.alter_column(
                'players',
                column,
                existing_type=sa.BigInteger(),
                type_=sa.Integer(),
                existing_nullable=False,
            )
