from typing import AsyncContextManager, Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_seat_hold_query_repo import ISeatHoldQueryRepo
from src.service.seat_hold.domain.entity.seat_hold_entity import SeatHold, SeatHoldHistory
from src.service.seat_hold.driven_adapter.model.seat_hold_history_model import (
    SeatHoldHistoryModel,
)
from src.service.seat_hold.driven_adapter.model.seat_hold_model import SeatHoldModel
from src.service.shared_kernel.domain.enum.seat_hold_status import (
    SeatHoldAction,
    SeatHoldStatus,
)


class SeatHoldQueryRepoImpl(ISeatHoldQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _to_entity(db_hold: SeatHoldModel) -> SeatHold:
        return SeatHold(
            id=db_hold.id,
            showtime_id=db_hold.showtime_id,
            seat_id=db_hold.seat_id,
            status=SeatHoldStatus(db_hold.status),
            lock_expires_at=db_hold.lock_expires_at,
            booking_id=db_hold.booking_id,
            created_at=db_hold.created_at,
            updated_at=db_hold.updated_at,
        )

    @Logger.io
    async def list_by_showtime(self, *, showtime_id: UUID) -> list[SeatHold]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(SeatHoldModel)
                .where(SeatHoldModel.showtime_id == showtime_id)
                .order_by(SeatHoldModel.seat_id)
            )
            return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_by_booking(self, *, booking_id: UUID) -> list[SeatHold]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(SeatHoldModel)
                .where(SeatHoldModel.booking_id == booking_id)
                .order_by(SeatHoldModel.seat_id)
            )
            return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_history(
        self, *, showtime_id: UUID | None = None, booking_id: UUID | None = None
    ) -> list[SeatHoldHistory]:
        stmt = select(SeatHoldHistoryModel)
        if showtime_id is not None:
            stmt = stmt.where(SeatHoldHistoryModel.showtime_id == showtime_id)
        if booking_id is not None:
            stmt = stmt.where(SeatHoldHistoryModel.booking_id == booking_id)
        stmt = stmt.order_by(SeatHoldHistoryModel.created_at, SeatHoldHistoryModel.id)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [
                SeatHoldHistory(
                    id=row.id,
                    showtime_id=row.showtime_id,
                    seat_id=row.seat_id,
                    booking_id=row.booking_id,
                    action=SeatHoldAction(row.action),
                    created_at=row.created_at,
                )
                for row in result.scalars().all()
            ]
