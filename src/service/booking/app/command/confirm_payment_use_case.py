from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    InvalidStateError,
)


class ConfirmPaymentUseCase:
    """
    Called by the payment collaborator once the charge settled.

    Idempotent per payment_ref: a repeated confirmation with the same ref
    returns the completed booking unchanged. The seat holds were already
    committed to BOOKED when the booking was created.
    """

    def __init__(self, *, booking_command_repo: IBookingCommandRepo, clock: IClock) -> None:
        self.booking_command_repo = booking_command_repo
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(booking_command_repo=booking_command_repo, clock=clock)

    @Logger.io
    async def confirm_payment(self, *, booking_id: UUID, payment_ref: str) -> Booking:
        booking = await self._get(booking_id)
        if self._already_paid_with(booking, payment_ref):
            return booking

        now = self.clock.now()
        booking.validate_can_be_paid(now=now)

        if not await self.booking_command_repo.complete_payment(
            booking_id=booking_id, payment_ref=payment_ref, now=now
        ):
            # Someone else moved the booking between our read and write
            current = await self._get(booking_id)
            if self._already_paid_with(current, payment_ref):
                return current
            current.validate_can_be_paid(now=now)
            raise InvalidStateError('Booking changed state during payment')

        metrics.record_booking_transition(transition='completed')
        Logger.base.info(f'💳 [BOOKING] Payment {payment_ref} completed booking {booking_id}')
        return await self._get(booking_id)

    async def _get(self, booking_id: UUID) -> Booking:
        booking = await self.booking_command_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')
        return booking

    @staticmethod
    def _already_paid_with(booking: Booking, payment_ref: str) -> bool:
        if booking.booking_status != BookingStatus.COMPLETED:
            return False
        if booking.payment_ref != payment_ref:
            raise InvalidStateError('Booking was already paid with a different payment reference')
        return True
