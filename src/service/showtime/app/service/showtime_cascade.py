from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus


SHOWTIME_CANCELLED_REASON = 'showtime cancelled'
SHOWTIME_COMPLETED_REASON = 'showtime completed'


class ShowtimeCascade:
    """
    Brings bookings and seat holds in line with a terminal showtime.

    - cancelled: every non-cancelled booking is cancelled (paid ones keep
      payment_status=completed for the refund flow), then all holds purged
    - completed: unpaid confirmed bookings are cancelled, then all holds purged

    Idempotent: running it twice for the same showtime changes nothing the
    second time, which is what lets the consistency sweep re-run it.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        seat_hold_store: SeatHoldStore,
        clock: IClock,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.seat_hold_store = seat_hold_store
        self.clock = clock

    @Logger.io
    async def run(self, *, showtime_id: UUID, status: ShowtimeStatus) -> dict[str, int]:
        if status == ShowtimeStatus.SCHEDULED:
            raise ValueError('Cascade only applies to completed or cancelled showtimes')

        is_cancel = status == ShowtimeStatus.CANCELLED
        cancelled_ids = await self.booking_command_repo.cancel_by_showtime(
            showtime_id=showtime_id,
            reason=SHOWTIME_CANCELLED_REASON if is_cancel else SHOWTIME_COMPLETED_REASON,
            include_paid=is_cancel,
            now=self.clock.now(),
        )
        if cancelled_ids:
            metrics.record_booking_transition(
                transition='cancelled_by_showtime', count=len(cancelled_ids)
            )

        purged = await self.seat_hold_store.purge_by_showtime(showtime_id=showtime_id)

        if cancelled_ids or purged:
            Logger.base.info(
                f'🎬 [SHOWTIME] {status} cascade for {showtime_id}: '
                f'{len(cancelled_ids)} bookings cancelled, {purged} holds purged'
            )
        return {'bookings_cancelled': len(cancelled_ids), 'holds_purged': purged}
