"""Create state_commitments, nullifiers and notes tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'state_commitments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('commitment', sa.String(length=66), nullable=False),
        sa.Column('block_height', sa.Integer(), nullable=False),
        sa.Column('timestamp', sa.BigInteger(), nullable=False),
        sa.Column('proof_hash', sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_state_commitments_commitment', 'state_commitments', ['commitment'])
    op.create_index('ix_state_commitments_block_height', 'state_commitments', ['block_height'], unique=True)

    op.create_table(
        'nullifiers',
        sa.Column('nullifier', sa.String(length=64), nullable=False),
        sa.Column('timestamp', sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint('nullifier'),
    )

    op.create_table(
        'notes',
        sa.Column('commitment', sa.String(length=64), nullable=False),
        sa.Column('value', sa.Float(), nullable=False),
        sa.Column('recipient', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.Column('spent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint('commitment'),
    )
    op.create_index('ix_notes_recipient', 'notes', ['recipient'])


def downgrade() -> None:
    op.drop_index('ix_notes_recipient', table_name='notes')
    op.drop_table('notes')
    op.drop_table('nullifiers')
    op.drop_index('ix_state_commitments_block_height', table_name='state_commitments')
    op.drop_index('ix_state_commitments_commitment', table_name='state_commitments')
    op.drop_table('state_commitments')
