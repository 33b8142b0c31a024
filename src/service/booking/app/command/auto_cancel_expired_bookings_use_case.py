from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.service.booking_canceller import EXPIRED_REASON, BookingCanceller
from src.service.shared_kernel.app.interface.i_clock import IClock


class AutoCancelExpiredBookingsUseCase:
    """
    Return seats of abandoned checkouts to the pool.

    Every confirmed/pending booking whose payment deadline has passed is
    cancelled with reason `expired`, which releases its seat holds.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        booking_canceller: BookingCanceller,
        clock: IClock,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.booking_canceller = booking_canceller
        self.clock = clock

    @Logger.io
    async def execute(self) -> int:
        expired_ids = await self.booking_command_repo.list_expired_ids(now=self.clock.now())
        cancelled = 0
        for booking_id in expired_ids:
            if await self.booking_canceller.cancel(booking_id=booking_id, reason=EXPIRED_REASON):
                cancelled += 1
        return cancelled
