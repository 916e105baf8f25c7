"""create user and game_session tables

Revision ID: 1a7c3e9d2b40
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a7c3e9d2b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'user' not in existing_tables:
        op.create_table(
            'user',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('password_hash', sa.String(length=128), nullable=False),
            sa.Column('registered_at', sa.DateTime(), nullable=False),
        )
        # usernames are unique regardless of case
        op.create_index('uq_user_username_lower', 'user', [sa.text('lower(username)')], unique=True)

    if 'game_session' not in existing_tables:
        op.create_table(
            'game_session',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False),
            sa.Column('mode', sa.String(length=16), nullable=False),
            sa.Column('started_at', sa.DateTime(), nullable=False),
            sa.Column('ended_at', sa.DateTime(), nullable=True),
            sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('strikes', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        )
        op.create_index(
            'ix_game_session_user_mode_completed',
            'game_session',
            ['user_id', 'mode', 'completed'],
        )


def downgrade():
    op.drop_index('ix_game_session_user_mode_completed', table_name='game_session')
    op.drop_table('game_session')
    op.drop_index('uq_user_username_lower', table_name='user')
    op.drop_table('user')
