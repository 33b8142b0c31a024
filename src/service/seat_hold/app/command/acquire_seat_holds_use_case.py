from datetime import timedelta
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore
from src.service.seat_hold.domain.entity.seat_hold_entity import SeatHold
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    InvalidStateError,
)
from src.service.showtime.app.interface.i_showtime_query_repo import IShowtimeQueryRepo


class AcquireSeatHoldsUseCase:
    """
    Lock seats ahead of booking creation (seat selection step of checkout).

    The returned hold ids can be handed to createBooking, which adopts them
    instead of acquiring again.
    """

    def __init__(
        self,
        *,
        seat_hold_store: SeatHoldStore,
        showtime_query_repo: IShowtimeQueryRepo,
        clock: IClock,
    ) -> None:
        self.seat_hold_store = seat_hold_store
        self.showtime_query_repo = showtime_query_repo
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        seat_hold_store: SeatHoldStore = Depends(Provide[Container.seat_hold_store]),
        showtime_query_repo: IShowtimeQueryRepo = Depends(Provide[Container.showtime_query_repo]),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            seat_hold_store=seat_hold_store, showtime_query_repo=showtime_query_repo, clock=clock
        )

    @Logger.io
    async def execute(self, *, showtime_id: UUID, seat_ids: list[str]) -> list[SeatHold]:
        showtime = await self.showtime_query_repo.get_by_id(showtime_id=showtime_id)
        if not showtime or showtime.is_deleted:
            raise NotFoundError('Showtime not found')
        if not showtime.is_bookable(now=self.clock.now()):
            raise InvalidStateError('Showtime is not open for booking')

        return await self.seat_hold_store.acquire(
            showtime_id=showtime_id,
            seat_ids=seat_ids,
            lease=timedelta(minutes=settings.BOOKING_LEASE_MINUTES),
        )
