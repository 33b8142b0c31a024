from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore
from src.service.shared_kernel.app.interface.i_clock import IClock


EXPIRED_REASON = 'expired'
SEAT_COMMIT_FAILED_REASON = 'seat commit failed'


class BookingCanceller:
    """
    confirmed/pending -> cancelled/failed, then release the booking's seat holds.

    The hold release runs whether or not this call won the status update, so
    re-cancelling a booking whose earlier cancel died half-way finishes it.
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
    async def cancel(self, *, booking_id: UUID, reason: str) -> bool:
        cancelled = await self.booking_command_repo.cancel(
            booking_id=booking_id, reason=reason, now=self.clock.now()
        )
        released = await self.seat_hold_store.release(booking_id=booking_id)

        if cancelled:
            metrics.record_booking_transition(
                transition=EXPIRED_REASON if reason == EXPIRED_REASON else 'cancelled'
            )
            Logger.base.info(
                f'🚫 [BOOKING] Cancelled {booking_id} ({reason}), released {released} seats'
            )
        return cancelled
