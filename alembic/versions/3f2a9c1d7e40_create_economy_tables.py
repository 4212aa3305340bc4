"""Create economy tables

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2025-11-02 18:41:27.512304

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BIGINT_KEY = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'players',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('gold', sa.Integer(), nullable=False),
        sa.Column('gems', sa.Integer(), nullable=False),
        sa.Column('metals', sa.Integer(), nullable=False),
        sa.Column('quartz', sa.Integer(), nullable=False),
        sa.Column('strength', sa.Integer(), nullable=False),
        sa.Column('speed', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('gold >= 0', name='ck_players_gold_nonnegative'),
        sa.CheckConstraint('gems >= 0', name='ck_players_gems_nonnegative'),
        sa.CheckConstraint('metals >= 0', name='ck_players_metals_nonnegative'),
        sa.CheckConstraint('quartz >= 0', name='ck_players_quartz_nonnegative'),
        sa.CheckConstraint('strength >= 0 AND speed >= 0', name='ck_players_stats_nonnegative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )
    op.create_table(
        'equipment',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('category', sa.String(length=16), nullable=False),
        sa.Column('slot_type', sa.String(length=16), nullable=False),
        sa.Column('cost_gold', sa.Integer(), nullable=False),
        sa.Column('damage_min', sa.Integer(), nullable=False),
        sa.Column('damage_max', sa.Integer(), nullable=False),
        sa.Column('protection', sa.Integer(), nullable=False),
        sa.Column('encumbrance', sa.Integer(), nullable=False),
        sa.Column('strength_required', sa.Integer(), nullable=False),
        sa.CheckConstraint("category IN ('weapon', 'armor')", name='ck_equipment_category'),
        sa.CheckConstraint(
            "slot_type IN ('weapon', 'head', 'body', 'legs', 'hands', 'feet')",
            name='ck_equipment_slot_type',
        ),
        sa.CheckConstraint('cost_gold >= 0', name='ck_equipment_cost_nonnegative'),
        sa.CheckConstraint('damage_min <= damage_max', name='ck_equipment_damage_range'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index('ix_equipment_slot_type', 'equipment', ['slot_type'], unique=False)
    op.create_table(
        'inventory_items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('equipment_id', sa.Integer(), nullable=False),
        sa.Column('equipped_slot', sa.String(length=16), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['equipment_id'], ['equipment.id']),
        sa.ForeignKeyConstraint(['owner_id'], ['players.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('owner_id', 'equipped_slot', name='uq_inventory_owner_slot'),
    )
    op.create_index('ix_inventory_items_owner', 'inventory_items', ['owner_id'], unique=False)
    op.create_table(
        'market_listings',
        sa.Column('id', BIGINT_KEY, autoincrement=True, nullable=False),
        sa.Column('seller_id', sa.String(length=36), nullable=False),
        sa.Column('item_type', sa.String(length=16), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.BigInteger(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('buyer_id', sa.String(length=36), nullable=True),
        sa.Column('closed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('quantity > 0', name='ck_market_listings_quantity_positive'),
        sa.CheckConstraint('unit_price > 0', name='ck_market_listings_price_positive'),
        sa.CheckConstraint("status IN ('active', 'sold', 'cancelled')", name='ck_market_listings_status'),
        sa.CheckConstraint(
            "item_type IN ('gems', 'metals', 'quartz')", name='ck_market_listings_item_type'
        ),
        sa.ForeignKeyConstraint(['buyer_id'], ['players.id']),
        sa.ForeignKeyConstraint(['seller_id'], ['players.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_market_listings_status_price', 'market_listings', ['status', 'unit_price'], unique=False)
    op.create_index('ix_market_listings_seller', 'market_listings', ['seller_id'], unique=False)
    op.create_table(
        'daily_purchases',
        sa.Column('id', BIGINT_KEY, autoincrement=True, nullable=False),
        sa.Column('player_id', sa.String(length=36), nullable=False),
        sa.Column('purchase_type', sa.String(length=16), nullable=False),
        sa.Column('purchase_date', sa.Date(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.CheckConstraint('quantity >= 0', name='ck_daily_purchases_quantity_nonnegative'),
        sa.ForeignKeyConstraint(['player_id'], ['players.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('player_id', 'purchase_type', 'purchase_date', name='uq_daily_purchases_day'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('daily_purchases')
    op.drop_index('ix_market_listings_seller', table_name='market_listings')
    op.drop_index('ix_market_listings_status_price', table_name='market_listings')
    op.drop_table('market_listings')
    op.drop_index('ix_inventory_items_owner', table_name='inventory_items')
    op.drop_table('inventory_items')
    op.drop_index('ix_equipment_slot_type', table_name='equipment')
    op.drop_table('equipment')
    op.drop_table('players')
