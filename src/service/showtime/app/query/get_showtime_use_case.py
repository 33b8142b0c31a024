from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.showtime.app.interface.i_showtime_query_repo import IShowtimeQueryRepo
from src.service.showtime.domain.entity.showtime_entity import Showtime


class GetShowtimeUseCase:
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
    async def get_showtime(self, *, showtime_id: UUID) -> Showtime:
        showtime = await self.showtime_query_repo.get_by_id(showtime_id=showtime_id)
        if not showtime or showtime.is_deleted:
            raise NotFoundError('Showtime not found')
        return showtime
