"""Add current_marketplace_listings table

Revision ID: 20221030_0001
Revises:
Create Date: 2022-10-30 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '20221030_0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'current_marketplace_listings',
        sa.Column('token_data_id_hash', sa.String(64), primary_key=True),
        sa.Column('collection_data_id_hash', sa.String(64), nullable=False),
        sa.Column('market_address', sa.String(66), nullable=False),
        sa.Column('property_version', sa.Numeric(), nullable=False),
        sa.Column('creator_address', sa.String(66), nullable=False),
        sa.Column('collection_name', sa.String(128), nullable=False),
        sa.Column('name', sa.String(128), nullable=False),
        sa.Column('seller', sa.String(66), nullable=False),
        sa.Column('amount', sa.Numeric(), nullable=False),
        sa.Column('price', sa.Numeric(), nullable=False),
        sa.Column('event_type', sa.String(150), nullable=False),
        sa.Column(
            'inserted_at',
            sa.DateTime(),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column('last_transaction_version', sa.BigInteger(), nullable=False),
    )
    op.create_index(
        'cml_tdih_pv_index',
        'current_marketplace_listings',
        ['token_data_id_hash', 'property_version'],
    )
    op.create_index(
        'cml_cdih_index', 'current_marketplace_listings', ['collection_data_id_hash']
    )
    op.create_index('cml_insat_index', 'current_marketplace_listings', ['inserted_at'])
    op.create_index(
        'cml_tv_index', 'current_marketplace_listings', ['last_transaction_version']
    )
    op.create_index('cml_seller_index', 'current_marketplace_listings', ['seller'])


def downgrade() -> None:
    op.drop_index('cml_seller_index', table_name='current_marketplace_listings')
    op.drop_index('cml_tv_index', table_name='current_marketplace_listings')
    op.drop_index('cml_insat_index', table_name='current_marketplace_listings')
    op.drop_index('cml_cdih_index', table_name='current_marketplace_listings')
    op.drop_index('cml_tdih_pv_index', table_name='current_marketplace_listings')
    op.drop_table('current_marketplace_listings')
