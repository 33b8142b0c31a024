from abc import ABC, abstractmethod

from uuid_utils import UUID

from src.service.seat_hold.domain.entity.seat_hold_entity import SeatHold, SeatHoldHistory


class ISeatHoldQueryRepo(ABC):
    @abstractmethod
    async def list_by_showtime(self, *, showtime_id: UUID) -> list[SeatHold]:
        pass

    @abstractmethod
    async def list_by_booking(self, *, booking_id: UUID) -> list[SeatHold]:
        pass

    @abstractmethod
    async def list_history(
        self, *, showtime_id: UUID | None = None, booking_id: UUID | None = None
    ) -> list[SeatHoldHistory]:
        pass
