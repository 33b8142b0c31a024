"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.booking.app.command import (
    cancel_booking_use_case,
    confirm_payment_use_case,
    create_booking_use_case,
    extend_booking_hold_use_case,
    soft_delete_booking_use_case,
)
from src.service.booking.app.query import get_booking_use_case, list_bookings_use_case
from src.service.seat_hold.app.command import (
    acquire_seat_holds_use_case,
    extend_seat_holds_use_case,
)
from src.service.seat_hold.app.query import (
    get_seat_map_use_case,
    list_seat_hold_history_use_case,
)
from src.service.showtime.app.command import (
    cancel_showtime_use_case,
    create_showtime_use_case,
    soft_delete_showtime_use_case,
    update_showtime_use_case,
)
from src.service.showtime.app.query import get_showtime_use_case, list_showtimes_use_case


WIRE_MODULES: list[ModuleType] = [
    # Seat holds
    acquire_seat_holds_use_case,
    extend_seat_holds_use_case,
    get_seat_map_use_case,
    list_seat_hold_history_use_case,
    # Bookings
    create_booking_use_case,
    confirm_payment_use_case,
    cancel_booking_use_case,
    extend_booking_hold_use_case,
    soft_delete_booking_use_case,
    get_booking_use_case,
    list_bookings_use_case,
    # Showtimes
    create_showtime_use_case,
    update_showtime_use_case,
    cancel_showtime_use_case,
    soft_delete_showtime_use_case,
    get_showtime_use_case,
    list_showtimes_use_case,
]
