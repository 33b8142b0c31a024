from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.reconciliation.app.dto.sweep_result import SweepResult
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.showtime.app.command.complete_showtime_use_case import CompleteShowtimeUseCase
from src.service.showtime.app.interface.i_showtime_command_repo import IShowtimeCommandRepo


tracer = trace.get_tracer(__name__)


class SweepShowtimesUseCase:
    """Complete every scheduled showtime whose end_time has passed."""

    JOB = 'showtime'

    def __init__(
        self,
        *,
        showtime_command_repo: IShowtimeCommandRepo,
        complete_showtime_use_case: CompleteShowtimeUseCase,
        clock: IClock,
    ) -> None:
        self.showtime_command_repo = showtime_command_repo
        self.complete_showtime_use_case = complete_showtime_use_case
        self.clock = clock

    @Logger.io
    async def execute(self) -> SweepResult:
        with tracer.start_as_current_span('reconciliation.showtime'):
            due_ids = await self.showtime_command_repo.list_ids_due_for_completion(
                now=self.clock.now()
            )
            completed = 0
            for showtime_id in due_ids:
                if await self.complete_showtime_use_case.complete(showtime_id=showtime_id):
                    completed += 1
        return SweepResult(job=self.JOB, counts={'showtimes_completed': completed})
