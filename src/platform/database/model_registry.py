"""
Importing this module registers every ORM model on Base.metadata.

Used by create_db_and_tables() and the alembic env.
"""

from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.seat_hold.driven_adapter.model.seat_hold_history_model import (
    SeatHoldHistoryModel,
)
from src.service.seat_hold.driven_adapter.model.seat_hold_model import SeatHoldModel
from src.service.showtime.driven_adapter.model.showtime_model import ShowtimeModel
from src.service.showtime.driven_adapter.model.title_model import TitleModel


__all__ = [
    'BookingModel',
    'SeatHoldHistoryModel',
    'SeatHoldModel',
    'ShowtimeModel',
    'TitleModel',
]
