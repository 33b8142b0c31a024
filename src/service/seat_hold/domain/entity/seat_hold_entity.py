from datetime import datetime, timedelta
from typing import Optional

import attrs
from uuid_utils import UUID, uuid7

from src.service.shared_kernel.domain.enum.seat_hold_status import (
    SeatHoldAction,
    SeatHoldStatus,
)


@attrs.define
class SeatHold:
    """
    Claim on one seat of one showtime.

    At most one row exists per (showtime_id, seat_id). A LOCKED hold whose
    lock_expires_at has passed is semantically free and may be overwritten.
    """

    id: UUID
    showtime_id: UUID
    seat_id: str
    status: SeatHoldStatus
    lock_expires_at: Optional[datetime] = None
    booking_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def lock(
        cls, *, showtime_id: UUID, seat_id: str, now: datetime, lease: timedelta
    ) -> 'SeatHold':
        return cls(
            id=uuid7(),
            showtime_id=showtime_id,
            seat_id=seat_id,
            status=SeatHoldStatus.LOCKED,
            lock_expires_at=now + lease,
            created_at=now,
            updated_at=now,
        )

    def is_lock_expired(self, *, now: datetime) -> bool:
        return (
            self.status == SeatHoldStatus.LOCKED
            and self.lock_expires_at is not None
            and self.lock_expires_at < now
        )

    def is_active_lock(self, *, now: datetime) -> bool:
        return self.status == SeatHoldStatus.LOCKED and not self.is_lock_expired(now=now)

    def is_committable(self, *, now: datetime) -> bool:
        return self.is_active_lock(now=now) and self.booking_id is None


@attrs.define
class SeatHoldHistory:
    id: UUID
    showtime_id: UUID
    seat_id: str
    booking_id: Optional[UUID]
    action: SeatHoldAction
    created_at: Optional[datetime] = None


@attrs.define
class SeatMapEntry:
    seat_id: str
    status: SeatHoldStatus
    lock_expires_at: Optional[datetime] = None
