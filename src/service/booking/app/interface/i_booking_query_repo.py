from abc import ABC, abstractmethod

from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus


class IBookingQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Booking | None:
        pass

    @abstractmethod
    async def get_by_reference_code(self, *, reference_code: str) -> Booking | None:
        pass

    @abstractmethod
    async def list_by_customer(
        self,
        *,
        customer_id: int,
        booking_status: BookingStatus | None = None,
        include_deleted: bool = False,
    ) -> list[Booking]:
        pass
