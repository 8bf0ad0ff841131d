"""initial schema: links, clicks, events, pageviews

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- Links ---
    op.create_table('links',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('scope', sa.String(length=100), server_default='', nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=False),
        sa.Column('target', sa.Text(), nullable=False),
        sa.Column('partner', sa.String(length=255), nullable=True),
        sa.Column('campaign', sa.String(length=255), nullable=True),
        sa.Column('conversion_rate', sa.Float(), nullable=True),
        sa.Column('average_order_value', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('scope', 'slug', name='uq_links_scope_slug'),
    )

    # --- Clicks (append-only) ---
    op.create_table('clicks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('click_id', sa.String(length=32), nullable=False),
        sa.Column('scope', sa.String(length=100), server_default='', nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=False),
        sa.Column('ip_hash', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('referer', sa.Text(), nullable=True),
        sa.Column('utm_source', sa.String(length=255), nullable=True),
        sa.Column('utm_medium', sa.String(length=255), nullable=True),
        sa.Column('utm_campaign', sa.String(length=255), nullable=True),
        sa.Column('session_token', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_clicks_click_id'), 'clicks', ['click_id'], unique=True)
    op.create_index('ix_clicks_scope_slug', 'clicks', ['scope', 'slug'], unique=False)

    # --- Site events (append-only) ---
    op.create_table('events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('session_token', sa.String(length=64), nullable=True),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('referer', sa.Text(), nullable=True),
        sa.Column('duration_ms', sa.Integer(), nullable=True),
        sa.Column('data', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_events_type'), 'events', ['type'], unique=False)

    op.create_table('pageviews',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('session_token', sa.String(length=64), nullable=True),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('referer', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    op.drop_table('pageviews')
    op.drop_index(op.f('ix_events_type'), table_name='events')
    op.drop_table('events')
    op.drop_index('ix_clicks_scope_slug', table_name='clicks')
    op.drop_index(op.f('ix_clicks_click_id'), table_name='clicks')
    op.drop_table('clicks')
    op.drop_table('links')
