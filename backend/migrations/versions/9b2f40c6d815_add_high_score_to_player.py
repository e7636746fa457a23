"""add high_score to player

Revision ID: 9b2f40c6d815
Revises: 3c7a91d0e2b4
Create Date: 2026-10-05 18:40:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '9b2f40c6d815'
down_revision = '3c7a91d0e2b4'
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    cols = {c['name'] for c in insp.get_columns('player')}
    with op.batch_alter_table('player') as batch_op:
        if 'high_score' not in cols:
            batch_op.add_column(sa.Column('high_score', sa.BigInteger(), nullable=False, server_default='0'))
        # Leaderboard range reads order by score
        batch_op.create_index(batch_op.f('ix_player_high_score'), ['high_score'], unique=False)


def downgrade():
    with op.batch_alter_table('player') as batch_op:
        batch_op.drop_index(batch_op.f('ix_player_high_score'))
        batch_op.drop_column('high_score')
