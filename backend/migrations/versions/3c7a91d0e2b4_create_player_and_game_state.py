"""create player and game_state tables

Revision ID: 3c7a91d0e2b4
Revises:
Create Date: 2026-09-28 10:12:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c7a91d0e2b4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'player',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('player') as batch_op:
        batch_op.create_index(batch_op.f('ix_player_username'), ['username'], unique=True)

    op.create_table(
        'game_state',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('player_id', sa.Integer(), nullable=False),
        sa.Column('money', sa.Float(), nullable=False),
        sa.Column('inventory', sa.Text(), nullable=False),
        sa.Column('item_costs', sa.Text(), nullable=False),
        sa.Column('last_visited_station', sa.String(length=128), nullable=False),
        sa.Column('game_clock', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['player_id'], ['player.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('game_state') as batch_op:
        batch_op.create_index(batch_op.f('ix_game_state_player_id'), ['player_id'], unique=True)


def downgrade():
    with op.batch_alter_table('game_state') as batch_op:
        batch_op.drop_index(batch_op.f('ix_game_state_player_id'))
    op.drop_table('game_state')

    with op.batch_alter_table('player') as batch_op:
        batch_op.drop_index(batch_op.f('ix_player_username'))
    op.drop_table('player')
