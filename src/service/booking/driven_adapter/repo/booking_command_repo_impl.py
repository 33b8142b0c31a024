from datetime import datetime
from typing import AsyncContextManager, Callable

from sqlalchemy import case, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus, PaymentStatus


def to_booking_entity(db_booking: BookingModel) -> Booking:
    return Booking(
        id=db_booking.id,
        customer_id=db_booking.customer_id,
        showtime_id=db_booking.showtime_id,
        seat_ids=list(db_booking.seat_ids),
        total_price=db_booking.total_price,
        reference_code=db_booking.reference_code,
        hold_expires_at=db_booking.hold_expires_at,
        booking_status=BookingStatus(db_booking.booking_status),
        payment_status=PaymentStatus(db_booking.payment_status),
        payment_ref=db_booking.payment_ref,
        cancel_reason=db_booking.cancel_reason,
        created_at=db_booking.created_at,
        updated_at=db_booking.updated_at,
        paid_at=db_booking.paid_at,
        cancelled_at=db_booking.cancelled_at,
        deleted_at=db_booking.deleted_at,
    )


class BookingCommandRepoImpl(IBookingCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _is_active():
        return (
            BookingModel.booking_status == BookingStatus.CONFIRMED.value,
            BookingModel.payment_status == PaymentStatus.PENDING.value,
        )

    @staticmethod
    def _cancelled_values(*, reason: str, now: datetime) -> dict:
        return {
            'booking_status': BookingStatus.CANCELLED.value,
            # Unpaid -> failed; a paid booking keeps completed so refunds can find it
            'payment_status': case(
                (
                    BookingModel.payment_status == PaymentStatus.PENDING.value,
                    PaymentStatus.FAILED.value,
                ),
                else_=BookingModel.payment_status,
            ),
            'cancel_reason': reason,
            'cancelled_at': now,
            'updated_at': now,
        }

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        async with self.session_factory() as session, session.begin():
            session.add(
                BookingModel(
                    id=booking.id,
                    customer_id=booking.customer_id,
                    showtime_id=booking.showtime_id,
                    seat_ids=list(booking.seat_ids),
                    seat_count=booking.seat_count,
                    total_price=booking.total_price,
                    booking_status=booking.booking_status.value,
                    payment_status=booking.payment_status.value,
                    reference_code=booking.reference_code,
                    hold_expires_at=booking.hold_expires_at,
                    created_at=booking.created_at,
                    updated_at=booking.updated_at,
                )
            )
        return booking

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Booking | None:
        async with self.session_factory() as session:
            db_booking = await session.get(BookingModel, booking_id)
            return to_booking_entity(db_booking) if db_booking else None

    @Logger.io
    async def exists_reference_code(self, *, reference_code: str) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(
                select(exists().where(BookingModel.reference_code == reference_code))
            )
            return bool(result.scalar())

    @Logger.io
    async def complete_payment(
        self, *, booking_id: UUID, payment_ref: str, now: datetime
    ) -> bool:
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                update(BookingModel)
                .where(
                    BookingModel.id == booking_id,
                    *self._is_active(),
                    BookingModel.hold_expires_at >= now,
                )
                .values(
                    booking_status=BookingStatus.COMPLETED.value,
                    payment_status=PaymentStatus.COMPLETED.value,
                    payment_ref=payment_ref,
                    paid_at=now,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def cancel(self, *, booking_id: UUID, reason: str, now: datetime) -> bool:
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                update(BookingModel)
                .where(BookingModel.id == booking_id, *self._is_active())
                .values(**self._cancelled_values(reason=reason, now=now))
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def list_expired_ids(self, *, now: datetime) -> list[UUID]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(BookingModel.id)
                .where(*self._is_active(), BookingModel.hold_expires_at < now)
                .order_by(BookingModel.hold_expires_at)
            )
            return list(result.scalars().all())

    @Logger.io
    async def cancel_by_showtime(
        self, *, showtime_id: UUID, reason: str, include_paid: bool, now: datetime
    ) -> list[UUID]:
        if include_paid:
            status_filter = (
                BookingModel.booking_status.in_(
                    [BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value]
                ),
            )
        else:
            status_filter = self._is_active()

        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                select(BookingModel.id)
                .where(BookingModel.showtime_id == showtime_id, *status_filter)
                .with_for_update()
            )
            booking_ids = list(result.scalars().all())
            if not booking_ids:
                return []

            await session.execute(
                update(BookingModel)
                .where(BookingModel.id.in_(booking_ids), *status_filter)
                .values(**self._cancelled_values(reason=reason, now=now))
                .execution_options(synchronize_session=False)
            )
            return booking_ids

    @Logger.io
    async def extend_hold(
        self, *, booking_id: UUID, hold_expires_at: datetime, now: datetime
    ) -> bool:
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                update(BookingModel)
                .where(
                    BookingModel.id == booking_id,
                    *self._is_active(),
                    BookingModel.hold_expires_at >= now,
                )
                .values(hold_expires_at=hold_expires_at, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def set_deleted_at(
        self, *, booking_id: UUID, deleted_at: datetime | None, now: datetime
    ) -> bool:
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                update(BookingModel)
                .where(BookingModel.id == booking_id)
                .values(deleted_at=deleted_at, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1  # type: ignore[attr-defined]
