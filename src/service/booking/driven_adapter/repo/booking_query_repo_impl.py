from typing import AsyncContextManager, Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.booking.driven_adapter.repo.booking_command_repo_impl import to_booking_entity
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus


class BookingQueryRepoImpl(IBookingQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Booking | None:
        async with self.session_factory() as session:
            db_booking = await session.get(BookingModel, booking_id)
            return to_booking_entity(db_booking) if db_booking else None

    @Logger.io
    async def get_by_reference_code(self, *, reference_code: str) -> Booking | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(BookingModel).where(BookingModel.reference_code == reference_code)
            )
            db_booking = result.scalar_one_or_none()
            return to_booking_entity(db_booking) if db_booking else None

    @Logger.io
    async def list_by_customer(
        self,
        *,
        customer_id: int,
        booking_status: BookingStatus | None = None,
        include_deleted: bool = False,
    ) -> list[Booking]:
        stmt = select(BookingModel).where(BookingModel.customer_id == customer_id)
        if booking_status is not None:
            stmt = stmt.where(BookingModel.booking_status == booking_status.value)
        if not include_deleted:
            stmt = stmt.where(BookingModel.deleted_at.is_(None))

        async with self.session_factory() as session:
            result = await session.execute(stmt.order_by(BookingModel.created_at.desc()))
            return [to_booking_entity(row) for row in result.scalars().all()]
