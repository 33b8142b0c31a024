from datetime import timedelta
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.seat_hold.app.interface.i_seat_hold_query_repo import ISeatHoldQueryRepo
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.enum.seat_hold_status import SeatHoldStatus
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    BookingExpiredError,
    InvalidStateError,
)
from src.service.shared_kernel.driving_adapter.http_controller.customer_identity import (
    ensure_owner,
)


class ExtendBookingHoldUseCase:
    """
    Give an unpaid booking one more lease.

    The booking's payment deadline and any of its holds still LOCKED move
    together, so no hold outlives (or dies before) the deadline it backs.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        seat_hold_query_repo: ISeatHoldQueryRepo,
        seat_hold_store: SeatHoldStore,
        clock: IClock,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.seat_hold_query_repo = seat_hold_query_repo
        self.seat_hold_store = seat_hold_store
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        seat_hold_query_repo: ISeatHoldQueryRepo = Depends(
            Provide[Container.seat_hold_query_repo]
        ),
        seat_hold_store: SeatHoldStore = Depends(Provide[Container.seat_hold_store]),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            booking_command_repo=booking_command_repo,
            seat_hold_query_repo=seat_hold_query_repo,
            seat_hold_store=seat_hold_store,
            clock=clock,
        )

    @Logger.io
    async def extend_hold(self, *, booking_id: UUID, customer_id: int) -> Booking:
        booking = await self.booking_command_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')
        ensure_owner(owner_id=booking.customer_id, customer_id=customer_id)

        now = self.clock.now()
        booking.validate_can_be_extended(now=now)

        lease = timedelta(minutes=settings.BOOKING_LEASE_MINUTES)
        if not await self.booking_command_repo.extend_hold(
            booking_id=booking_id, hold_expires_at=now + lease, now=now
        ):
            current = await self.booking_command_repo.get_by_id(booking_id=booking_id)
            if current and current.is_active:
                raise BookingExpiredError(booking_id=booking_id)
            raise InvalidStateError('Booking changed state during extension')

        locked = [
            hold.id
            for hold in await self.seat_hold_query_repo.list_by_booking(booking_id=booking_id)
            if hold.status == SeatHoldStatus.LOCKED
        ]
        if locked:
            await self.seat_hold_store.extend(
                hold_ids=locked, additional=lease, booking_id=booking_id
            )

        Logger.base.info(f'⏳ [BOOKING] Extended hold of {booking_id} by {lease}')
        extended = await self.booking_command_repo.get_by_id(booking_id=booking_id)
        assert extended is not None, 'Bookings are never hard-deleted'
        return extended
