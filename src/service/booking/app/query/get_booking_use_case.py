from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.value_object.reference_code import is_valid_reference_code
from src.service.shared_kernel.driving_adapter.http_controller.customer_identity import (
    ensure_owner,
)


class GetBookingUseCase:
    def __init__(self, booking_query_repo: IBookingQueryRepo):
        self.booking_query_repo = booking_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo)

    @Logger.io
    async def get_booking(self, *, booking_id: UUID, customer_id: int) -> Booking:
        booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')
        ensure_owner(owner_id=booking.customer_id, customer_id=customer_id)
        return booking

    @Logger.io
    async def get_by_reference(self, *, reference_code: str, customer_id: int) -> Booking:
        code = reference_code.strip().upper()
        if not is_valid_reference_code(code):
            raise DomainError('Invalid booking reference code')

        booking = await self.booking_query_repo.get_by_reference_code(reference_code=code)
        if not booking:
            raise NotFoundError('Booking not found')
        ensure_owner(owner_id=booking.customer_id, customer_id=customer_id)
        return booking
