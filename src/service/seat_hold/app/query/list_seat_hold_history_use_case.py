from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_seat_hold_query_repo import ISeatHoldQueryRepo
from src.service.seat_hold.domain.entity.seat_hold_entity import SeatHoldHistory


class ListSeatHoldHistoryUseCase:
    def __init__(self, *, seat_hold_query_repo: ISeatHoldQueryRepo) -> None:
        self.seat_hold_query_repo = seat_hold_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        seat_hold_query_repo: ISeatHoldQueryRepo = Depends(
            Provide[Container.seat_hold_query_repo]
        ),
    ) -> Self:
        return cls(seat_hold_query_repo=seat_hold_query_repo)

    @Logger.io
    async def execute(
        self, *, showtime_id: UUID | None = None, booking_id: UUID | None = None
    ) -> list[SeatHoldHistory]:
        if showtime_id is None and booking_id is None:
            raise DomainError('showtime_id or booking_id is required')
        return await self.seat_hold_query_repo.list_history(
            showtime_id=showtime_id, booking_id=booking_id
        )
