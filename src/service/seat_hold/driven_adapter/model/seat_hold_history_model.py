from datetime import datetime
from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from uuid_utils import UUID

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime import UTCDateTime
from src.platform.types.uuid7_utils_types import UUID7Type


class SeatHoldHistoryModel(Base):
    """Append-only audit of seat commits and releases"""

    __tablename__ = 'seat_hold_history'

    id: Mapped[UUID] = mapped_column(UUID7Type(), primary_key=True)  # UUID7
    showtime_id: Mapped[UUID] = mapped_column(UUID7Type(), nullable=False, index=True)
    seat_id: Mapped[str] = mapped_column(String(16), nullable=False)
    booking_id: Mapped[Optional[UUID]] = mapped_column(UUID7Type(), nullable=True, index=True)
    action: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), server_default=func.now(), nullable=False
    )
