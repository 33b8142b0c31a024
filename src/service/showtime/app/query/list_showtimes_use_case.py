from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus
from src.service.showtime.app.interface.i_showtime_query_repo import IShowtimeQueryRepo
from src.service.showtime.domain.entity.showtime_entity import Showtime


class ListShowtimesUseCase:
    def __init__(self, showtime_query_repo: IShowtimeQueryRepo):
        self.showtime_query_repo = showtime_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        showtime_query_repo: IShowtimeQueryRepo = Depends(Provide[Container.showtime_query_repo]),
    ) -> Self:
        return cls(showtime_query_repo=showtime_query_repo)

    @Logger.io
    async def list_showtimes(
        self,
        *,
        room_id: Optional[int] = None,
        status: Optional[ShowtimeStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Showtime]:
        """date_to is inclusive; dates are UTC calendar days"""
        if date_from and date_to and date_from > date_to:
            raise DomainError('date_from must not be after date_to')

        starts_from: datetime | None = None
        starts_until: datetime | None = None
        if date_from:
            starts_from = datetime.combine(date_from, time.min, tzinfo=timezone.utc)
        if date_to:
            starts_until = datetime.combine(
                date_to + timedelta(days=1), time.min, tzinfo=timezone.utc
            )

        return await self.showtime_query_repo.list_showtimes(
            room_id=room_id, status=status, starts_from=starts_from, starts_until=starts_until
        )
