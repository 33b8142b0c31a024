from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.showtime.app.interface.i_showtime_command_repo import IShowtimeCommandRepo
from src.service.showtime.domain.entity.showtime_entity import Showtime


class SoftDeleteShowtimeUseCase:
    """
    Hide / unhide a showtime.

    Deleted showtimes are not bookable and don't block their room, so a
    restore re-checks the room for overlap under the room lock.
    """

    def __init__(self, *, showtime_command_repo: IShowtimeCommandRepo, clock: IClock) -> None:
        self.showtime_command_repo = showtime_command_repo
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        showtime_command_repo: IShowtimeCommandRepo = Depends(
            Provide[Container.showtime_command_repo]
        ),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(showtime_command_repo=showtime_command_repo, clock=clock)

    @Logger.io
    async def delete(self, *, showtime_id: UUID) -> None:
        showtime = await self._get(showtime_id)
        if showtime.is_deleted:
            return
        await self.showtime_command_repo.soft_delete(showtime_id=showtime_id, now=self.clock.now())

    @Logger.io
    async def restore(self, *, showtime_id: UUID) -> Showtime:
        showtime = await self._get(showtime_id)
        if not showtime.is_deleted:
            return showtime

        await self.showtime_command_repo.restore(showtime_id=showtime_id, now=self.clock.now())
        return await self._get(showtime_id)

    async def _get(self, showtime_id: UUID) -> Showtime:
        showtime = await self.showtime_command_repo.get_by_id(showtime_id=showtime_id)
        if not showtime:
            raise NotFoundError('Showtime not found')
        return showtime
