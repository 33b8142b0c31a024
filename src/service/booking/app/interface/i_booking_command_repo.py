from abc import ABC, abstractmethod
from datetime import datetime

from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import Booking


class IBookingCommandRepo(ABC):
    """
    Booking writes. Every transition is a conditional UPDATE keyed on the
    expected current status; the bool / id list tells the caller whether
    its write was the one that applied.
    """

    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Booking | None:
        pass

    @abstractmethod
    async def exists_reference_code(self, *, reference_code: str) -> bool:
        pass

    @abstractmethod
    async def complete_payment(
        self, *, booking_id: UUID, payment_ref: str, now: datetime
    ) -> bool:
        """confirmed/pending with an unexpired hold -> completed/completed"""
        pass

    @abstractmethod
    async def cancel(self, *, booking_id: UUID, reason: str, now: datetime) -> bool:
        """confirmed/pending -> cancelled/failed"""
        pass

    @abstractmethod
    async def list_expired_ids(self, *, now: datetime) -> list[UUID]:
        """confirmed/pending bookings whose hold_expires_at < now"""
        pass

    @abstractmethod
    async def cancel_by_showtime(
        self, *, showtime_id: UUID, reason: str, include_paid: bool, now: datetime
    ) -> list[UUID]:
        """
        Cancel the showtime's confirmed bookings, plus completed (paid) ones
        when include_paid. Paid bookings keep payment_status=completed.
        """
        pass

    @abstractmethod
    async def extend_hold(
        self, *, booking_id: UUID, hold_expires_at: datetime, now: datetime
    ) -> bool:
        pass

    @abstractmethod
    async def set_deleted_at(
        self, *, booking_id: UUID, deleted_at: datetime | None, now: datetime
    ) -> bool:
        pass
