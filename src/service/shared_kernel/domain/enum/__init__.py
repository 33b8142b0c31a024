"""Shared Kernel Enums"""

from src.service.shared_kernel.domain.enum.booking_status import BookingStatus, PaymentStatus
from src.service.shared_kernel.domain.enum.seat_hold_status import SeatHoldAction, SeatHoldStatus
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus

__all__ = ['BookingStatus', 'PaymentStatus', 'SeatHoldAction', 'SeatHoldStatus', 'ShowtimeStatus']
