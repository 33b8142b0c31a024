from typing import AsyncContextManager, Callable

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.reconciliation.app.interface.i_reconciliation_query_repo import (
    IReconciliationQueryRepo,
)
from src.service.seat_hold.driven_adapter.model.seat_hold_model import SeatHoldModel
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus
from src.service.shared_kernel.domain.enum.seat_hold_status import SeatHoldStatus
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus
from src.service.showtime.driven_adapter.model.showtime_model import ShowtimeModel


_LIVE_BOOKING_STATUSES = [BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value]


class ReconciliationQueryRepoImpl(IReconciliationQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def list_orphaned_booked_hold_ids(self) -> list[UUID]:
        stmt = (
            select(SeatHoldModel.id)
            .outerjoin(BookingModel, BookingModel.id == SeatHoldModel.booking_id)
            .where(
                SeatHoldModel.status == SeatHoldStatus.BOOKED.value,
                or_(
                    BookingModel.id.is_(None),
                    BookingModel.booking_status.not_in(_LIVE_BOOKING_STATUSES),
                ),
            )
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    @Logger.io
    async def list_paid_booking_ids_with_locked_holds(self) -> list[UUID]:
        stmt = (
            select(BookingModel.id)
            .join(SeatHoldModel, SeatHoldModel.booking_id == BookingModel.id)
            .where(
                BookingModel.booking_status == BookingStatus.COMPLETED.value,
                SeatHoldModel.status == SeatHoldStatus.LOCKED.value,
            )
            .distinct()
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    @Logger.io
    async def list_cancelled_showtime_ids_with_open_bookings(self) -> list[UUID]:
        stmt = (
            select(ShowtimeModel.id)
            .join(BookingModel, BookingModel.showtime_id == ShowtimeModel.id)
            .where(
                ShowtimeModel.status == ShowtimeStatus.CANCELLED.value,
                BookingModel.booking_status.in_(_LIVE_BOOKING_STATUSES),
            )
            .distinct()
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    @Logger.io
    async def list_finished_showtimes_with_holds(self) -> list[tuple[UUID, ShowtimeStatus]]:
        stmt = (
            select(ShowtimeModel.id, ShowtimeModel.status)
            .join(SeatHoldModel, SeatHoldModel.showtime_id == ShowtimeModel.id)
            .where(
                ShowtimeModel.status.in_(
                    [ShowtimeStatus.COMPLETED.value, ShowtimeStatus.CANCELLED.value]
                )
            )
            .distinct()
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [(row.id, ShowtimeStatus(row.status)) for row in result.all()]
