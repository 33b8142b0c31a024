"""init_db_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17

Schema:
- title: Catalog titles (read-only here; owned by the catalog service)
- showtime: Scheduled screenings per room
- booking: Customer bookings with payment deadline and reference code
- seat_hold: One row per held seat; (showtime_id, seat_id) unique
- seat_hold_history: Append-only audit of commits and releases
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create all tables with final schema."""

    op.create_table(
        'title',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'showtime',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('title_id', sa.Integer(), nullable=False),
        sa.Column('show_date', sa.Date(), nullable=False),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('language', sa.String(length=50), nullable=True),
        sa.Column('subtitle', sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_showtime_title_id', 'showtime', ['title_id'])
    op.create_index('ix_showtime_room_starts_at', 'showtime', ['room_id', 'starts_at'])
    op.create_index('ix_showtime_status_ends_at', 'showtime', ['status', 'ends_at'])

    op.create_table(
        'booking',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('showtime_id', sa.Uuid(), nullable=False),
        sa.Column('seat_ids', sa.JSON(), nullable=False),
        sa.Column('seat_count', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Integer(), nullable=False),
        sa.Column('booking_status', sa.String(length=20), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('reference_code', sa.String(length=8), nullable=False),
        sa.Column('payment_ref', sa.String(length=128), nullable=True),
        sa.Column('cancel_reason', sa.String(length=255), nullable=True),
        sa.Column('hold_expires_at', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('reference_code'),
    )
    op.create_index('ix_booking_showtime_id', 'booking', ['showtime_id'])
    op.create_index(
        'ix_booking_status_hold_expires_at', 'booking', ['booking_status', 'hold_expires_at']
    )
    op.create_index('ix_booking_customer_created_at', 'booking', ['customer_id', 'created_at'])

    op.create_table(
        'seat_hold',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('showtime_id', sa.Uuid(), nullable=False),
        sa.Column('seat_id', sa.String(length=16), nullable=False),
        sa.Column('booking_id', sa.Uuid(), nullable=True),
        sa.Column('status', sa.String(length=10), nullable=False),
        sa.Column('lock_expires_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('showtime_id', 'seat_id', name='uq_seat_hold_showtime_seat'),
    )
    op.create_index('ix_seat_hold_showtime_id', 'seat_hold', ['showtime_id'])
    op.create_index('ix_seat_hold_booking_id', 'seat_hold', ['booking_id'])
    op.create_index(
        'ix_seat_hold_status_lock_expires_at', 'seat_hold', ['status', 'lock_expires_at']
    )

    op.create_table(
        'seat_hold_history',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('showtime_id', sa.Uuid(), nullable=False),
        sa.Column('seat_id', sa.String(length=16), nullable=False),
        sa.Column('booking_id', sa.Uuid(), nullable=True),
        sa.Column('action', sa.String(length=10), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_seat_hold_history_showtime_id', 'seat_hold_history', ['showtime_id'])
    op.create_index('ix_seat_hold_history_booking_id', 'seat_hold_history', ['booking_id'])


def downgrade() -> None:
    op.drop_table('seat_hold_history')
    op.drop_table('seat_hold')
    op.drop_table('booking')
    op.drop_table('showtime')
    op.drop_table('title')
