from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from uuid_utils import UUID

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime import UTCDateTime
from src.platform.types.uuid7_utils_types import UUID7Type


class ShowtimeModel(Base):
    __tablename__ = 'showtime'
    __table_args__ = (
        Index('ix_showtime_room_starts_at', 'room_id', 'starts_at'),
        Index('ix_showtime_status_ends_at', 'status', 'ends_at'),
    )

    id: Mapped[UUID] = mapped_column(UUID7Type(), primary_key=True)  # UUID7
    room_id: Mapped[int] = mapped_column(Integer, nullable=False)
    title_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    show_date: Mapped[date] = mapped_column(Date, nullable=False)
    starts_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    ends_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='scheduled', nullable=False)
    language: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    subtitle: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), server_default=func.now(), nullable=False
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
