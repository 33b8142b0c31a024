from datetime import datetime
from typing import AsyncContextManager, Callable

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID, uuid7

from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.interface.i_seat_hold_command_repo import ISeatHoldCommandRepo
from src.service.seat_hold.domain.entity.seat_hold_entity import SeatHold
from src.service.seat_hold.driven_adapter.model.seat_hold_history_model import (
    SeatHoldHistoryModel,
)
from src.service.seat_hold.driven_adapter.model.seat_hold_model import SeatHoldModel
from src.service.shared_kernel.domain.enum.seat_hold_status import (
    SeatHoldAction,
    SeatHoldStatus,
)
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    LockAlreadyConsumedError,
)


class SeatHoldCommandRepoImpl(ISeatHoldCommandRepo):
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

    @staticmethod
    def _history_rows(
        rows: list[SeatHoldModel],
        *,
        action: SeatHoldAction,
        now: datetime,
        booking_id: UUID | None = None,
    ) -> list[SeatHoldHistoryModel]:
        return [
            SeatHoldHistoryModel(
                id=uuid7(),
                showtime_id=row.showtime_id,
                seat_id=row.seat_id,
                booking_id=booking_id or row.booking_id,
                action=action.value,
                created_at=now,
            )
            for row in rows
        ]

    @Logger.io
    async def lock_seat(self, *, hold: SeatHold, now: datetime) -> SeatHold | None:
        async with self.session_factory() as session:
            try:
                async with session.begin():
                    # Expired locks are free; clear one before claiming the seat
                    await session.execute(
                        delete(SeatHoldModel)
                        .where(
                            SeatHoldModel.showtime_id == hold.showtime_id,
                            SeatHoldModel.seat_id == hold.seat_id,
                            SeatHoldModel.status == SeatHoldStatus.LOCKED.value,
                            SeatHoldModel.lock_expires_at < now,
                        )
                        .execution_options(synchronize_session=False)
                    )
                    await session.execute(
                        insert(SeatHoldModel).values(
                            id=hold.id,
                            showtime_id=hold.showtime_id,
                            seat_id=hold.seat_id,
                            booking_id=None,
                            status=SeatHoldStatus.LOCKED.value,
                            lock_expires_at=hold.lock_expires_at,
                            created_at=now,
                            updated_at=now,
                        )
                    )
            except IntegrityError:
                return None
        return hold

    @Logger.io
    async def delete_by_ids(self, *, hold_ids: list[UUID]) -> int:
        if not hold_ids:
            return 0
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                delete(SeatHoldModel)
                .where(
                    SeatHoldModel.id.in_(hold_ids),
                    SeatHoldModel.status == SeatHoldStatus.LOCKED.value,
                    SeatHoldModel.booking_id.is_(None),
                )
                .execution_options(synchronize_session=False)
            )
            return result.rowcount  # type: ignore[attr-defined]

    @Logger.io
    async def get_by_ids(self, *, hold_ids: list[UUID]) -> list[SeatHold]:
        if not hold_ids:
            return []
        async with self.session_factory() as session:
            result = await session.execute(
                select(SeatHoldModel).where(SeatHoldModel.id.in_(hold_ids))
            )
            return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def extend_lock(
        self,
        *,
        hold_id: UUID,
        now: datetime,
        lock_expires_at: datetime,
        booking_id: UUID | None = None,
    ) -> bool:
        owner = (
            SeatHoldModel.booking_id.is_(None)
            if booking_id is None
            else SeatHoldModel.booking_id == booking_id
        )
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                update(SeatHoldModel)
                .where(
                    SeatHoldModel.id == hold_id,
                    SeatHoldModel.status == SeatHoldStatus.LOCKED.value,
                    owner,
                )
                .values(lock_expires_at=lock_expires_at, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def commit_to_booking(
        self, *, hold_ids: list[UUID], booking_id: UUID, now: datetime
    ) -> list[UUID]:
        async with self.session_factory() as session, session.begin():
            rows = (
                await session.execute(
                    select(SeatHoldModel).where(SeatHoldModel.id.in_(hold_ids)).with_for_update()
                )
            ).scalars().all()
            committable = {
                row.id: row
                for row in rows
                if row.status == SeatHoldStatus.LOCKED.value
                and row.booking_id is None
                and row.lock_expires_at is not None
                and row.lock_expires_at >= now
            }
            failed = [hold_id for hold_id in hold_ids if hold_id not in committable]
            if failed:
                return failed

            result = await session.execute(
                update(SeatHoldModel)
                .where(
                    SeatHoldModel.id.in_(hold_ids),
                    SeatHoldModel.status == SeatHoldStatus.LOCKED.value,
                    SeatHoldModel.lock_expires_at >= now,
                    SeatHoldModel.booking_id.is_(None),
                )
                .values(
                    status=SeatHoldStatus.BOOKED.value,
                    booking_id=booking_id,
                    lock_expires_at=None,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != len(committable):  # type: ignore[attr-defined]
                # Rolled back on exit; another writer took some of the rows between read and write
                raise LockAlreadyConsumedError(hold_ids=list(committable))

            session.add_all(
                self._history_rows(
                    list(committable.values()),
                    action=SeatHoldAction.BOOKED,
                    now=now,
                    booking_id=booking_id,
                )
            )
        return []

    @Logger.io
    async def commit_attached_locks(self, *, booking_id: UUID, now: datetime) -> int:
        async with self.session_factory() as session, session.begin():
            rows = (
                await session.execute(
                    select(SeatHoldModel)
                    .where(
                        SeatHoldModel.booking_id == booking_id,
                        SeatHoldModel.status == SeatHoldStatus.LOCKED.value,
                    )
                    .with_for_update()
                )
            ).scalars().all()
            if not rows:
                return 0
            await session.execute(
                update(SeatHoldModel)
                .where(SeatHoldModel.id.in_([row.id for row in rows]))
                .values(status=SeatHoldStatus.BOOKED.value, lock_expires_at=None, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            session.add_all(self._history_rows(list(rows), action=SeatHoldAction.BOOKED, now=now))
            return len(rows)

    @Logger.io
    async def release_by_booking(self, *, booking_id: UUID, now: datetime) -> int:
        async with self.session_factory() as session, session.begin():
            rows = (
                await session.execute(
                    select(SeatHoldModel)
                    .where(SeatHoldModel.booking_id == booking_id)
                    .with_for_update()
                )
            ).scalars().all()
            if not rows:
                return 0
            await self._delete_and_record(session, rows=list(rows), now=now)
            return len(rows)

    @Logger.io
    async def release_by_ids(self, *, hold_ids: list[UUID], now: datetime) -> int:
        if not hold_ids:
            return 0
        async with self.session_factory() as session, session.begin():
            rows = (
                await session.execute(
                    select(SeatHoldModel).where(SeatHoldModel.id.in_(hold_ids)).with_for_update()
                )
            ).scalars().all()
            if not rows:
                return 0
            await self._delete_and_record(session, rows=list(rows), now=now)
            return len(rows)

    @Logger.io
    async def purge_expired_locks(self, *, now: datetime) -> int:
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                delete(SeatHoldModel)
                .where(
                    SeatHoldModel.status == SeatHoldStatus.LOCKED.value,
                    SeatHoldModel.lock_expires_at < now,
                )
                .execution_options(synchronize_session=False)
            )
            return result.rowcount  # type: ignore[attr-defined]

    @Logger.io
    async def purge_by_showtime(self, *, showtime_id: UUID, now: datetime) -> int:
        async with self.session_factory() as session, session.begin():
            rows = (
                await session.execute(
                    select(SeatHoldModel)
                    .where(SeatHoldModel.showtime_id == showtime_id)
                    .with_for_update()
                )
            ).scalars().all()
            if not rows:
                return 0
            await self._delete_and_record(session, rows=list(rows), now=now)
            return len(rows)

    async def _delete_and_record(
        self, session: AsyncSession, *, rows: list[SeatHoldModel], now: datetime
    ) -> None:
        await session.execute(
            delete(SeatHoldModel)
            .where(SeatHoldModel.id.in_([row.id for row in rows]))
            .execution_options(synchronize_session=False)
        )
        booked = [row for row in rows if row.status == SeatHoldStatus.BOOKED.value]
        session.add_all(self._history_rows(booked, action=SeatHoldAction.RELEASED, now=now))
