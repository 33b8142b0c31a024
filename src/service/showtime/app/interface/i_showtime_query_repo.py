from abc import ABC, abstractmethod
from datetime import datetime

from uuid_utils import UUID

from src.service.showtime.domain.entity.showtime_entity import Showtime
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus


class IShowtimeQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, showtime_id: UUID) -> Showtime | None:
        pass

    @abstractmethod
    async def list_showtimes(
        self,
        *,
        room_id: int | None = None,
        status: ShowtimeStatus | None = None,
        starts_from: datetime | None = None,
        starts_until: datetime | None = None,
        include_deleted: bool = False,
    ) -> list[Showtime]:
        pass
