from enum import StrEnum


class SeatHoldStatus(StrEnum):
    LOCKED = 'locked'
    BOOKED = 'booked'


class SeatHoldAction(StrEnum):
    """Audit trail actions recorded in seat_hold_history"""

    BOOKED = 'booked'
    RELEASED = 'released'
