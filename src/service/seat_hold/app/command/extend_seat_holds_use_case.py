from datetime import timedelta
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore
from src.service.seat_hold.domain.entity.seat_hold_entity import SeatHold


class ExtendSeatHoldsUseCase:
    """Renew loose locks by one lease. Holds attached to a booking go through the booking."""

    def __init__(self, *, seat_hold_store: SeatHoldStore) -> None:
        self.seat_hold_store = seat_hold_store

    @classmethod
    @inject
    def depends(
        cls,
        seat_hold_store: SeatHoldStore = Depends(Provide[Container.seat_hold_store]),
    ) -> Self:
        return cls(seat_hold_store=seat_hold_store)

    @Logger.io
    async def execute(self, *, hold_ids: list[UUID]) -> list[SeatHold]:
        if not hold_ids:
            raise DomainError('hold_ids must not be empty')
        return await self.seat_hold_store.extend(
            hold_ids=list(dict.fromkeys(hold_ids)),
            additional=timedelta(minutes=settings.BOOKING_LEASE_MINUTES),
        )
