from datetime import datetime
from typing import Optional

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from uuid_utils import UUID

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime import UTCDateTime
from src.platform.types.uuid7_utils_types import UUID7Type


class SeatHoldModel(Base):
    __tablename__ = 'seat_hold'
    __table_args__ = (
        # The only double-booking guard: one row per seat per showtime
        UniqueConstraint('showtime_id', 'seat_id', name='uq_seat_hold_showtime_seat'),
        Index('ix_seat_hold_status_lock_expires_at', 'status', 'lock_expires_at'),
    )

    id: Mapped[UUID] = mapped_column(UUID7Type(), primary_key=True)  # UUID7
    showtime_id: Mapped[UUID] = mapped_column(UUID7Type(), nullable=False, index=True)
    seat_id: Mapped[str] = mapped_column(String(16), nullable=False)
    booking_id: Mapped[Optional[UUID]] = mapped_column(UUID7Type(), nullable=True, index=True)
    status: Mapped[str] = mapped_column(String(10), nullable=False)
    lock_expires_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), server_default=func.now(), nullable=False
    )
