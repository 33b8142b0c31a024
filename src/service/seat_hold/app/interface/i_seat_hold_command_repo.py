from abc import ABC, abstractmethod
from datetime import datetime

from uuid_utils import UUID

from src.service.seat_hold.domain.entity.seat_hold_entity import SeatHold


class ISeatHoldCommandRepo(ABC):
    """
    Every method runs in its own short transaction and decides races with
    conditional writes guarded by the (showtime_id, seat_id) unique key.
    """

    @abstractmethod
    async def lock_seat(self, *, hold: SeatHold, now: datetime) -> SeatHold | None:
        """
        Atomically take one seat: drop an expired lock on the same seat, insert
        the new hold. Returns None when a live hold already owns the seat.
        """
        pass

    @abstractmethod
    async def delete_by_ids(self, *, hold_ids: list[UUID]) -> int:
        pass

    @abstractmethod
    async def get_by_ids(self, *, hold_ids: list[UUID]) -> list[SeatHold]:
        pass

    @abstractmethod
    async def extend_lock(
        self,
        *,
        hold_id: UUID,
        now: datetime,
        lock_expires_at: datetime,
        booking_id: UUID | None = None,
    ) -> bool:
        """
        Move lock_expires_at of a LOCKED hold owned by booking_id (None: a loose
        hold); False when the row is booked, owned by someone else or gone.
        """
        pass

    @abstractmethod
    async def commit_to_booking(
        self, *, hold_ids: list[UUID], booking_id: UUID, now: datetime
    ) -> list[UUID]:
        """
        LOCKED -> BOOKED for unexpired, unattached holds, all or none.
        Returns the ids that could not be committed (empty on success).
        """
        pass

    @abstractmethod
    async def commit_attached_locks(self, *, booking_id: UUID, now: datetime) -> int:
        """LOCKED -> BOOKED for holds already pointing at booking_id, ignoring expiry."""
        pass

    @abstractmethod
    async def release_by_booking(self, *, booking_id: UUID, now: datetime) -> int:
        pass

    @abstractmethod
    async def release_by_ids(self, *, hold_ids: list[UUID], now: datetime) -> int:
        """Delete the given holds whatever their state, recording booked ones as released."""
        pass

    @abstractmethod
    async def purge_expired_locks(self, *, now: datetime) -> int:
        pass

    @abstractmethod
    async def purge_by_showtime(self, *, showtime_id: UUID, now: datetime) -> int:
        pass
