"""Add collection and token volume tables

Revision ID: 20221105_0002
Revises: 20221030_0001
Create Date: 2022-11-05 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '20221105_0002'
down_revision: Union[str, None] = '20221030_0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _inserted_at() -> sa.Column:
    return sa.Column(
        'inserted_at', sa.DateTime(), server_default=sa.func.now(), nullable=False
    )


def upgrade() -> None:
    op.create_table(
        'current_collection_volumes',
        sa.Column('collection_data_id_hash', sa.String(64), primary_key=True),
        sa.Column('volume', sa.Numeric(), nullable=False),
        _inserted_at(),
        sa.Column('last_transaction_version', sa.BigInteger(), nullable=False),
    )
    op.create_index(
        'ccv_index', 'current_collection_volumes', ['last_transaction_version']
    )

    op.create_table(
        'collection_volumes',
        sa.Column('collection_data_id_hash', sa.String(64), nullable=False),
        sa.Column('last_transaction_version', sa.BigInteger(), nullable=False),
        sa.Column('event_index', sa.BigInteger(), nullable=False),
        sa.Column('volume', sa.Numeric(), nullable=False),
        _inserted_at(),
        sa.PrimaryKeyConstraint(
            'collection_data_id_hash', 'last_transaction_version', 'event_index'
        ),
    )
    op.create_index('cv_tv_index', 'collection_volumes', ['last_transaction_version'])
    op.create_index('cv_insat_index', 'collection_volumes', ['inserted_at'])

    op.create_table(
        'current_token_volumes',
        sa.Column('token_data_id_hash', sa.String(64), primary_key=True),
        sa.Column('volume', sa.Numeric(), nullable=False),
        _inserted_at(),
        sa.Column('last_transaction_version', sa.BigInteger(), nullable=False),
    )
    op.create_index('ctv_index', 'current_token_volumes', ['last_transaction_version'])

    op.create_table(
        'token_volumes',
        sa.Column('token_data_id_hash', sa.String(64), nullable=False),
        sa.Column('last_transaction_version', sa.BigInteger(), nullable=False),
        sa.Column('event_index', sa.BigInteger(), nullable=False),
        sa.Column('volume', sa.Numeric(), nullable=False),
        _inserted_at(),
        sa.PrimaryKeyConstraint(
            'token_data_id_hash', 'last_transaction_version', 'event_index'
        ),
    )
    op.create_index('tv_tv_index', 'token_volumes', ['last_transaction_version'])
    op.create_index('tv_insat_index', 'token_volumes', ['inserted_at'])


def downgrade() -> None:
    op.drop_index('tv_insat_index', table_name='token_volumes')
    op.drop_index('tv_tv_index', table_name='token_volumes')
    op.drop_table('token_volumes')
    op.drop_index('ctv_index', table_name='current_token_volumes')
    op.drop_table('current_token_volumes')
    op.drop_index('cv_insat_index', table_name='collection_volumes')
    op.drop_index('cv_tv_index', table_name='collection_volumes')
    op.drop_table('collection_volumes')
    op.drop_index('ccv_index', table_name='current_collection_volumes')
    op.drop_table('current_collection_volumes')
