# alembic/versions/0001_calendar.py

"""Calendar events and ICS subscriptions

Revision ID: 0001_calendar
Revises:
Create Date: 2026-10-18 12:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_calendar'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Creates calendar_events and calendar_subscriptions."""
    # События контент-календаря (даты naive)
    op.create_table(
        'calendar_events',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('owner_id', sa.String(length=128), nullable=False, comment="Owning user ID"),
        sa.Column('title', sa.String(length=512), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('all_day', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('color', sa.String(length=32), nullable=True),
        sa.Column('source', sa.String(length=16), nullable=False, server_default='manual'),  # manual | ai
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_calendar_events_owner_id', 'calendar_events', ['owner_id'])
    op.create_index('ix_calendar_events_owner_start', 'calendar_events', ['owner_id', 'start_date'])

    # Токены подписки на ICS-фид
    op.create_table(
        'calendar_subscriptions',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('owner_id', sa.String(length=128), nullable=False),
        sa.Column('token', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_calendar_subscriptions_owner_id', 'calendar_subscriptions', ['owner_id'])
    op.create_index('ix_calendar_subscriptions_token', 'calendar_subscriptions', ['token'], unique=True)


def downgrade() -> None:
    """Drops the calendar tables."""
    op.drop_index('ix_calendar_subscriptions_token', table_name='calendar_subscriptions')
    op.drop_index('ix_calendar_subscriptions_owner_id', table_name='calendar_subscriptions')
    op.drop_table('calendar_subscriptions')
    op.drop_index('ix_calendar_events_owner_start', table_name='calendar_events')
    op.drop_index('ix_calendar_events_owner_id', table_name='calendar_events')
    op.drop_table('calendar_events')
