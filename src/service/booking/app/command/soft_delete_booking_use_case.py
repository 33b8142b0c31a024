from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.driving_adapter.http_controller.customer_identity import (
    ensure_owner,
)


class SoftDeleteBookingUseCase:
    """Hide a booking from the customer's list. booking_status is never touched."""

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
    async def delete(self, *, booking_id: UUID, customer_id: int) -> None:
        booking = await self._get_owned(booking_id=booking_id, customer_id=customer_id)
        if booking.is_deleted:
            return
        now = self.clock.now()
        await self.booking_command_repo.set_deleted_at(
            booking_id=booking_id, deleted_at=now, now=now
        )

    @Logger.io
    async def restore(self, *, booking_id: UUID, customer_id: int) -> Booking:
        booking = await self._get_owned(booking_id=booking_id, customer_id=customer_id)
        if not booking.is_deleted:
            return booking
        await self.booking_command_repo.set_deleted_at(
            booking_id=booking_id, deleted_at=None, now=self.clock.now()
        )
        return await self._get_owned(booking_id=booking_id, customer_id=customer_id)

    async def _get_owned(self, *, booking_id: UUID, customer_id: int) -> Booking:
        booking = await self.booking_command_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')
        ensure_owner(owner_id=booking.customer_id, customer_id=customer_id)
        return booking
