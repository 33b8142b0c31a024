from abc import ABC, abstractmethod
from datetime import datetime

from uuid_utils import UUID

from src.service.showtime.domain.entity.showtime_entity import Showtime
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus


class IShowtimeCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, showtime: Showtime) -> Showtime:
        """Insert unless the room is taken; raises OverlapConflictError."""
        pass

    @abstractmethod
    async def get_by_id(self, *, showtime_id: UUID) -> Showtime | None:
        pass

    @abstractmethod
    async def update_schedule(self, *, showtime: Showtime) -> bool:
        """
        Persist room/title/times; applies only while the row is still scheduled.
        Raises OverlapConflictError when the new slot is taken.
        """
        pass

    @abstractmethod
    async def transition_status(
        self,
        *,
        showtime_id: UUID,
        from_status: ShowtimeStatus,
        to_status: ShowtimeStatus,
        now: datetime,
    ) -> bool:
        """Conditional status change; False when another writer got there first."""
        pass

    @abstractmethod
    async def list_ids_due_for_completion(self, *, now: datetime) -> list[UUID]:
        pass

    @abstractmethod
    async def soft_delete(self, *, showtime_id: UUID, now: datetime) -> bool:
        pass

    @abstractmethod
    async def restore(self, *, showtime_id: UUID, now: datetime) -> bool:
        """Clear deleted_at unless the slot was taken meanwhile (OverlapConflictError)."""
        pass
