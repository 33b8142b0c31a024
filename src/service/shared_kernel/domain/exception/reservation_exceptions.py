"""
Typed failures of the reservation engine.

Contention errors (lost a race for a seat or a lock) are expected under load
and logged at INFO. State-validity errors mean the caller asked for a
transition the entity's current state does not allow.
"""

from datetime import datetime
from typing import Iterable

from uuid_utils import UUID

from src.platform.exception.exceptions import (
    ConflictError,
    ContentionError,
    DomainError,
    GoneError,
)


def _ids(values: Iterable[object]) -> list[str]:
    return [str(v) for v in values]


# ========== Contention ==========


class SeatUnavailableError(ContentionError):
    def __init__(self, *, showtime_id: UUID, seat_ids: list[str]) -> None:
        self.showtime_id = showtime_id
        self.seat_ids = seat_ids
        super().__init__(
            f'One or more selected seats are no longer available: {", ".join(seat_ids)}',
            context={'showtime_id': str(showtime_id), 'seat_ids': seat_ids},
        )


class LockExpiredError(ContentionError):
    def __init__(self, *, hold_ids: list[UUID]) -> None:
        self.hold_ids = hold_ids
        super().__init__('Seat lock has expired', context={'hold_ids': _ids(hold_ids)})


class LockAlreadyConsumedError(ContentionError):
    def __init__(self, *, hold_ids: list[UUID]) -> None:
        self.hold_ids = hold_ids
        super().__init__(
            'Seat lock is already attached to a booking', context={'hold_ids': _ids(hold_ids)}
        )


class NotLockedError(ContentionError):
    def __init__(self, *, hold_ids: list[UUID]) -> None:
        self.hold_ids = hold_ids
        super().__init__(
            'Seat holds are not locked or their lock has expired',
            context={'hold_ids': _ids(hold_ids)},
        )


# ========== State validity ==========


class InvalidStateError(ConflictError):
    log_level = 'WARNING'

    def __init__(self, message: str) -> None:
        super().__init__(message)


class OverlapConflictError(ConflictError):
    log_level = 'WARNING'

    def __init__(
        self, *, room_id: int, conflicts: list[tuple[UUID, datetime, datetime]]
    ) -> None:
        self.room_id = room_id
        self.conflicts = conflicts
        super().__init__(
            f'Showtime overlaps {len(conflicts)} existing showtime(s) in room {room_id}',
            context={
                'room_id': room_id,
                'conflicts': [
                    {
                        'showtime_id': str(showtime_id),
                        'starts_at': starts_at.isoformat(),
                        'ends_at': ends_at.isoformat(),
                    }
                    for showtime_id, starts_at, ends_at in conflicts
                ],
            },
        )


class InThePastError(DomainError):
    log_level = 'WARNING'

    def __init__(self, message: str = 'Showtime would end in the past') -> None:
        super().__init__(message, 400)


class BookingExpiredError(GoneError):
    def __init__(self, *, booking_id: UUID) -> None:
        self.booking_id = booking_id
        super().__init__(f'Booking {booking_id} hold has expired')
