from abc import ABC, abstractmethod

from uuid_utils import UUID

from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus


class IReconciliationQueryRepo(ABC):
    """Cross-table drift detection; the repairs go through each component's own writes."""

    @abstractmethod
    async def list_orphaned_booked_hold_ids(self) -> list[UUID]:
        """BOOKED holds whose booking is missing or neither confirmed nor completed"""
        pass

    @abstractmethod
    async def list_paid_booking_ids_with_locked_holds(self) -> list[UUID]:
        pass

    @abstractmethod
    async def list_cancelled_showtime_ids_with_open_bookings(self) -> list[UUID]:
        """Cancelled showtimes that still have confirmed or completed bookings"""
        pass

    @abstractmethod
    async def list_finished_showtimes_with_holds(self) -> list[tuple[UUID, ShowtimeStatus]]:
        """Completed or cancelled showtimes that still have seat_hold rows"""
        pass
