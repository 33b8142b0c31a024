from datetime import timedelta

from uuid_utils import uuid7

from src.service.booking.domain.entity.booking_entity import Booking
from test.constants import CUSTOMER_ID, T0


def build_booking(**overrides) -> Booking:
    values = {
        'id': uuid7(),
        'customer_id': CUSTOMER_ID,
        'showtime_id': uuid7(),
        'seat_ids': ['A1', 'A2'],
        'total_price': 2400,
        'reference_code': 'AB12CD34',
        'hold_expires_at': T0 + timedelta(minutes=15),
        'created_at': T0,
        'updated_at': T0,
    }
    values.update(overrides)
    return Booking(**values)
