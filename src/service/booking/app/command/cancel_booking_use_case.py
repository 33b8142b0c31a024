from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.service.booking_canceller import BookingCanceller
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    InvalidStateError,
)
from src.service.shared_kernel.driving_adapter.http_controller.customer_identity import (
    ensure_owner,
)


CUSTOMER_CANCELLED_REASON = 'cancelled by customer'


class CancelBookingUseCase:
    """Customer-initiated cancel of an unpaid booking; paid ones go through refunds."""

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        booking_canceller: BookingCanceller,
        seat_hold_store: SeatHoldStore,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.booking_canceller = booking_canceller
        self.seat_hold_store = seat_hold_store

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        booking_canceller: BookingCanceller = Depends(Provide[Container.booking_canceller]),
        seat_hold_store: SeatHoldStore = Depends(Provide[Container.seat_hold_store]),
    ) -> Self:
        return cls(
            booking_command_repo=booking_command_repo,
            booking_canceller=booking_canceller,
            seat_hold_store=seat_hold_store,
        )

    @Logger.io
    async def cancel_booking(
        self,
        *,
        booking_id: UUID,
        customer_id: Optional[int] = None,
        reason: str = CUSTOMER_CANCELLED_REASON,
    ) -> Booking:
        booking = await self._get(booking_id)
        if customer_id is not None:
            ensure_owner(owner_id=booking.customer_id, customer_id=customer_id)

        if booking.booking_status == BookingStatus.CANCELLED:
            # Finish a cascade an earlier cancel may have left half-done
            await self.seat_hold_store.release(booking_id=booking_id)
        booking.validate_can_be_cancelled()

        if not await self.booking_canceller.cancel(booking_id=booking_id, reason=reason):
            current = await self._get(booking_id)
            if current.booking_status != BookingStatus.CANCELLED:
                current.validate_can_be_cancelled()
                raise InvalidStateError('Booking changed state during cancellation')
            return current

        return await self._get(booking_id)

    async def _get(self, booking_id: UUID) -> Booking:
        booking = await self.booking_command_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')
        return booking
