from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus
from src.service.showtime.app.interface.i_showtime_command_repo import IShowtimeCommandRepo
from src.service.showtime.app.service.showtime_cascade import ShowtimeCascade
from src.service.showtime.domain.entity.showtime_entity import Showtime


class CancelShowtimeUseCase:
    """
    Scheduled -> Cancelled, then the cancel cascade.

    When another request already cancelled the showtime, the cascade is still
    run so a half-finished one gets completed.
    """

    def __init__(
        self,
        *,
        showtime_command_repo: IShowtimeCommandRepo,
        showtime_cascade: ShowtimeCascade,
        clock: IClock,
    ) -> None:
        self.showtime_command_repo = showtime_command_repo
        self.showtime_cascade = showtime_cascade
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        showtime_command_repo: IShowtimeCommandRepo = Depends(
            Provide[Container.showtime_command_repo]
        ),
        showtime_cascade: ShowtimeCascade = Depends(Provide[Container.showtime_cascade]),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            showtime_command_repo=showtime_command_repo,
            showtime_cascade=showtime_cascade,
            clock=clock,
        )

    @Logger.io
    async def cancel(self, *, showtime_id: UUID) -> Showtime:
        showtime = await self.showtime_command_repo.get_by_id(showtime_id=showtime_id)
        if not showtime:
            raise NotFoundError('Showtime not found')
        if showtime.status != ShowtimeStatus.CANCELLED:
            showtime.ensure_scheduled()

        transitioned = await self.showtime_command_repo.transition_status(
            showtime_id=showtime_id,
            from_status=ShowtimeStatus.SCHEDULED,
            to_status=ShowtimeStatus.CANCELLED,
            now=self.clock.now(),
        )
        current = await self.showtime_command_repo.get_by_id(showtime_id=showtime_id)
        assert current is not None, 'Showtimes are never hard-deleted'
        # Lost the race: fine if the winner also cancelled, not if it completed
        if not transitioned and current.status != ShowtimeStatus.CANCELLED:
            current.ensure_scheduled()

        await self.showtime_cascade.run(showtime_id=showtime_id, status=ShowtimeStatus.CANCELLED)
        return current
