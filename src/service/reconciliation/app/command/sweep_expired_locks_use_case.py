from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.reconciliation.app.dto.sweep_result import SweepResult
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore


tracer = trace.get_tracer(__name__)


class SweepExpiredLocksUseCase:
    """
    Delete LOCKED holds past their lease.

    Liveness does not depend on this job: acquire already treats an expired
    lock as free. The sweep keeps the table and the seat map tidy.
    """

    JOB = 'lock'

    def __init__(self, *, seat_hold_store: SeatHoldStore) -> None:
        self.seat_hold_store = seat_hold_store

    @Logger.io
    async def execute(self) -> SweepResult:
        with tracer.start_as_current_span('reconciliation.lock'):
            purged = await self.seat_hold_store.purge_expired_locks()
        return SweepResult(job=self.JOB, counts={'locks_purged': purged})
