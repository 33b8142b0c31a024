from uuid_utils import UUID

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus
from src.service.showtime.app.interface.i_showtime_command_repo import IShowtimeCommandRepo
from src.service.showtime.app.service.showtime_cascade import ShowtimeCascade


class CompleteShowtimeUseCase:
    """
    Scheduled -> Completed once the showtime has ended, then the completion
    cascade (unpaid bookings cancelled, every seat hold purged).

    Driven by the showtime sweep only; reads never change status.
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

    @Logger.io
    async def complete(self, *, showtime_id: UUID) -> bool:
        """
        True when this call performed the transition. A showtime cancelled in
        the meantime is left alone; an already completed one has its cascade re-run.
        """
        transitioned = await self.showtime_command_repo.transition_status(
            showtime_id=showtime_id,
            from_status=ShowtimeStatus.SCHEDULED,
            to_status=ShowtimeStatus.COMPLETED,
            now=self.clock.now(),
        )
        if not transitioned:
            current = await self.showtime_command_repo.get_by_id(showtime_id=showtime_id)
            if not current:
                raise NotFoundError('Showtime not found')
            if current.status == ShowtimeStatus.CANCELLED:
                Logger.base.info(f'⏭️  [SHOWTIME] {showtime_id} was cancelled, not completing')
                return False

        await self.showtime_cascade.run(showtime_id=showtime_id, status=ShowtimeStatus.COMPLETED)
        if transitioned:
            Logger.base.info(f'🏁 [SHOWTIME] Completed {showtime_id}')
        return transitioned
