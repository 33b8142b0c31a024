from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from uuid_utils import UUID

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime import UTCDateTime
from src.platform.types.uuid7_utils_types import UUID7Type


class BookingModel(Base):
    __tablename__ = 'booking'
    __table_args__ = (
        Index('ix_booking_status_hold_expires_at', 'booking_status', 'hold_expires_at'),
        Index('ix_booking_customer_created_at', 'customer_id', 'created_at'),
    )

    id: Mapped[UUID] = mapped_column(UUID7Type(), primary_key=True)  # UUID7
    customer_id: Mapped[int] = mapped_column(Integer, nullable=False)
    showtime_id: Mapped[UUID] = mapped_column(UUID7Type(), nullable=False, index=True)
    seat_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    seat_count: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    booking_status: Mapped[str] = mapped_column(String(20), default='confirmed', nullable=False)
    payment_status: Mapped[str] = mapped_column(String(20), default='pending', nullable=False)
    reference_code: Mapped[str] = mapped_column(String(8), unique=True, nullable=False)
    payment_ref: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    cancel_reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    hold_expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), server_default=func.now(), nullable=False
    )
    paid_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
