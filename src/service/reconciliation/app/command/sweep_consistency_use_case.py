from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.reconciliation.app.dto.sweep_result import SweepResult
from src.service.reconciliation.app.interface.i_reconciliation_query_repo import (
    IReconciliationQueryRepo,
)
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus
from src.service.showtime.app.service.showtime_cascade import ShowtimeCascade


tracer = trace.get_tracer(__name__)


class SweepConsistencyUseCase:
    """
    Detect and repair drift between seat holds, bookings and showtimes.

    Each repair is one of the ordinary idempotent writes, so a repair that
    races a live request converges on the same state:
    1. BOOKED holds with no live booking are released
    2. paid bookings with holds still LOCKED get those holds committed
    3. cancelled showtimes with open bookings get the cancel cascade again
    4. finished showtimes that still have holds get their cascade again
    """

    JOB = 'consistency'

    def __init__(
        self,
        *,
        reconciliation_query_repo: IReconciliationQueryRepo,
        seat_hold_store: SeatHoldStore,
        showtime_cascade: ShowtimeCascade,
    ) -> None:
        self.reconciliation_query_repo = reconciliation_query_repo
        self.seat_hold_store = seat_hold_store
        self.showtime_cascade = showtime_cascade

    @Logger.io
    async def execute(self) -> SweepResult:
        counts = {
            'orphaned_holds_released': 0,
            'paid_holds_committed': 0,
            'bookings_cancelled': 0,
            'holds_purged': 0,
        }

        with tracer.start_as_current_span('reconciliation.consistency'):
            orphaned = await self.reconciliation_query_repo.list_orphaned_booked_hold_ids()
            if orphaned:
                counts['orphaned_holds_released'] = await self.seat_hold_store.release_drifted(
                    hold_ids=orphaned
                )

            repo = self.reconciliation_query_repo
            for booking_id in await repo.list_paid_booking_ids_with_locked_holds():
                counts['paid_holds_committed'] += await self.seat_hold_store.commit_attached_locks(
                    booking_id=booking_id
                )

            for showtime_id in await repo.list_cancelled_showtime_ids_with_open_bookings():
                self._accumulate(
                    counts,
                    await self.showtime_cascade.run(
                        showtime_id=showtime_id, status=ShowtimeStatus.CANCELLED
                    ),
                )

            for showtime_id, status in await repo.list_finished_showtimes_with_holds():
                self._accumulate(
                    counts, await self.showtime_cascade.run(showtime_id=showtime_id, status=status)
                )

        result = SweepResult(job=self.JOB, counts=counts)
        if result.total:
            Logger.base.warning(f'🩹 [RECONCILIATION] Repaired drift: {counts}')
        return result

    @staticmethod
    def _accumulate(counts: dict[str, int], cascade: dict[str, int]) -> None:
        counts['bookings_cancelled'] += cascade['bookings_cancelled']
        counts['holds_purged'] += cascade['holds_purged']
