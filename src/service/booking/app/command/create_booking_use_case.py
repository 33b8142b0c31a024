from datetime import timedelta
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.app.service.booking_canceller import (
    SEAT_COMMIT_FAILED_REASON,
    BookingCanceller,
)
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.value_object.reference_code import generate_reference_code
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore
from src.service.seat_hold.domain.entity.seat_hold_entity import SeatHold
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    InvalidStateError,
    LockAlreadyConsumedError,
    LockExpiredError,
    SeatUnavailableError,
)
from src.service.showtime.app.interface.i_showtime_query_repo import IShowtimeQueryRepo


class CreateBookingUseCase:
    """
    Reserve seats and open a booking for them, all or nothing.

    Flow:
    1. Showtime must be scheduled, visible and not started yet
    2. Lock the seats (or adopt holds the customer locked beforehand)
    3. Insert the booking: confirmed/pending, payment deadline = earliest lock expiry
    4. Commit the holds LOCKED -> BOOKED onto the booking

    Any failure after step 2 cancels the booking (if it was written) and drops
    every hold of this attempt before the error propagates. A lost race in
    step 4 surfaces as SeatUnavailableError like a lost race in step 2.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        showtime_query_repo: IShowtimeQueryRepo,
        seat_hold_store: SeatHoldStore,
        booking_canceller: BookingCanceller,
        clock: IClock,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.showtime_query_repo = showtime_query_repo
        self.seat_hold_store = seat_hold_store
        self.booking_canceller = booking_canceller
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        showtime_query_repo: IShowtimeQueryRepo = Depends(Provide[Container.showtime_query_repo]),
        seat_hold_store: SeatHoldStore = Depends(Provide[Container.seat_hold_store]),
        booking_canceller: BookingCanceller = Depends(Provide[Container.booking_canceller]),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            booking_command_repo=booking_command_repo,
            showtime_query_repo=showtime_query_repo,
            seat_hold_store=seat_hold_store,
            booking_canceller=booking_canceller,
            clock=clock,
        )

    @Logger.io
    async def create_booking(
        self,
        *,
        customer_id: int,
        showtime_id: UUID,
        seat_ids: List[str],
        total_price: int,
        hold_ids: Optional[List[UUID]] = None,
    ) -> Booking:
        with self.tracer.start_as_current_span(
            'use_case.create_booking',
            attributes={
                'showtime.id': str(showtime_id),
                'customer.id': customer_id,
                'seat.count': len(seat_ids),
            },
        ):
            showtime = await self.showtime_query_repo.get_by_id(showtime_id=showtime_id)
            if not showtime or showtime.is_deleted:
                raise NotFoundError('Showtime not found')
            if not showtime.is_bookable(now=self.clock.now()):
                raise InvalidStateError('Showtime is not open for booking')

            if hold_ids:
                holds = await self._adopt_holds(
                    showtime_id=showtime_id, seat_ids=seat_ids, hold_ids=hold_ids
                )
            else:
                holds = await self.seat_hold_store.acquire(
                    showtime_id=showtime_id,
                    seat_ids=seat_ids,
                    lease=timedelta(minutes=settings.BOOKING_LEASE_MINUTES),
                )

            booking: Booking | None = None
            try:
                booking = await self._insert_booking(
                    customer_id=customer_id,
                    showtime_id=showtime_id,
                    seat_ids=seat_ids,
                    total_price=total_price,
                    holds=holds,
                )
                await self.seat_hold_store.commit(
                    hold_ids=[hold.id for hold in holds], booking_id=booking.id
                )
            except (LockExpiredError, LockAlreadyConsumedError):
                await self._compensate(booking=booking, holds=holds)
                metrics.record_booking_transition(transition='compensated')
                raise SeatUnavailableError(showtime_id=showtime_id, seat_ids=list(seat_ids))
            except Exception:
                await self._compensate(booking=booking, holds=holds)
                metrics.record_booking_transition(transition='compensated')
                raise

        metrics.record_booking_transition(transition='created')
        Logger.base.info(
            f'🎟️  [BOOKING] {booking.reference_code} created for customer {customer_id}: '
            f'{seat_ids} of showtime {showtime_id}'
        )
        return booking

    async def _adopt_holds(
        self, *, showtime_id: UUID, seat_ids: List[str], hold_ids: List[UUID]
    ) -> list[SeatHold]:
        """
        Holds locked through the seat-hold endpoint must belong to this showtime
        and cover exactly the requested seats, one hold per seat.
        """
        if len(set(seat_ids)) != len(seat_ids):
            raise DomainError('Duplicate seats in request')
        if len(set(hold_ids)) != len(hold_ids) or len(hold_ids) != len(seat_ids):
            raise DomainError('hold_ids must match seat_ids one to one')

        now = self.clock.now()
        holds = await self.seat_hold_store.get_holds(hold_ids=list(hold_ids))
        usable = [
            hold
            for hold in holds
            if hold.showtime_id == showtime_id and hold.is_committable(now=now)
        ]
        usable_seats = {hold.seat_id for hold in usable}
        missing = [seat_id for seat_id in seat_ids if seat_id not in usable_seats]
        if missing or len(usable) != len(holds) or usable_seats != set(seat_ids):
            raise SeatUnavailableError(showtime_id=showtime_id, seat_ids=missing or list(seat_ids))
        return usable

    async def _insert_booking(
        self,
        *,
        customer_id: int,
        showtime_id: UUID,
        seat_ids: List[str],
        total_price: int,
        holds: list[SeatHold],
    ) -> Booking:
        now = self.clock.now()
        # Payment deadline never outlives any of the locks behind it
        hold_expires_at = min(hold.lock_expires_at for hold in holds if hold.lock_expires_at)
        booking = Booking.create(
            customer_id=customer_id,
            showtime_id=showtime_id,
            seat_ids=seat_ids,
            total_price=total_price,
            reference_code=await self._unique_reference_code(),
            hold_expires_at=hold_expires_at,
            now=now,
        )
        return await self.booking_command_repo.create(booking=booking)

    async def _unique_reference_code(self) -> str:
        for _ in range(settings.REFERENCE_CODE_MAX_ATTEMPTS):
            code = generate_reference_code()
            if not await self.booking_command_repo.exists_reference_code(reference_code=code):
                return code
        raise RuntimeError('Could not generate a unique booking reference code')

    async def _compensate(self, *, booking: Booking | None, holds: list[SeatHold]) -> None:
        try:
            if booking is not None:
                await self.booking_canceller.cancel(
                    booking_id=booking.id, reason=SEAT_COMMIT_FAILED_REASON
                )
            await self.seat_hold_store.release_holds(hold_ids=[hold.id for hold in holds])
        except Exception as e:
            # Leftovers are picked up by the booking and lock sweeps
            Logger.base.error(f'❌ [BOOKING] Compensation failed: {type(e).__name__}: {e}')
