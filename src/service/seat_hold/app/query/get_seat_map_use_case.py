from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_seat_hold_query_repo import ISeatHoldQueryRepo
from src.service.seat_hold.domain.entity.seat_hold_entity import SeatMapEntry
from src.service.shared_kernel.app.interface.i_clock import IClock


class GetSeatMapUseCase:
    """Taken seats of a showtime; seats absent from the result are available."""

    def __init__(self, *, seat_hold_query_repo: ISeatHoldQueryRepo, clock: IClock) -> None:
        self.seat_hold_query_repo = seat_hold_query_repo
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        seat_hold_query_repo: ISeatHoldQueryRepo = Depends(
            Provide[Container.seat_hold_query_repo]
        ),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(seat_hold_query_repo=seat_hold_query_repo, clock=clock)

    @Logger.io
    async def execute(self, *, showtime_id: UUID) -> list[SeatMapEntry]:
        now = self.clock.now()
        holds = await self.seat_hold_query_repo.list_by_showtime(showtime_id=showtime_id)
        return [
            SeatMapEntry(
                seat_id=hold.seat_id, status=hold.status, lock_expires_at=hold.lock_expires_at
            )
            for hold in holds
            if not hold.is_lock_expired(now=now)
        ]
