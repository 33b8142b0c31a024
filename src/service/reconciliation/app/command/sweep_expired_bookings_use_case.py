from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.auto_cancel_expired_bookings_use_case import (
    AutoCancelExpiredBookingsUseCase,
)
from src.service.reconciliation.app.dto.sweep_result import SweepResult


tracer = trace.get_tracer(__name__)


class SweepExpiredBookingsUseCase:
    JOB = 'booking'

    def __init__(
        self, *, auto_cancel_expired_bookings_use_case: AutoCancelExpiredBookingsUseCase
    ) -> None:
        self.auto_cancel_expired_bookings_use_case = auto_cancel_expired_bookings_use_case

    @Logger.io
    async def execute(self) -> SweepResult:
        with tracer.start_as_current_span('reconciliation.booking'):
            cancelled = await self.auto_cancel_expired_bookings_use_case.execute()
        return SweepResult(job=self.JOB, counts={'bookings_expired': cancelled})
