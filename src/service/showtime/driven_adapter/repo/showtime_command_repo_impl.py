from datetime import datetime
from typing import AsyncContextManager, Callable

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    OverlapConflictError,
)
from src.service.showtime.app.interface.i_showtime_command_repo import IShowtimeCommandRepo
from src.service.showtime.domain.entity.showtime_entity import Showtime
from src.service.showtime.driven_adapter.model.showtime_model import ShowtimeModel


def to_showtime_entity(db_showtime: ShowtimeModel) -> Showtime:
    return Showtime(
        id=db_showtime.id,
        room_id=db_showtime.room_id,
        title_id=db_showtime.title_id,
        starts_at=db_showtime.starts_at,
        ends_at=db_showtime.ends_at,
        status=ShowtimeStatus(db_showtime.status),
        language=db_showtime.language,
        subtitle=db_showtime.subtitle,
        created_at=db_showtime.created_at,
        updated_at=db_showtime.updated_at,
        deleted_at=db_showtime.deleted_at,
    )


class ShowtimeCommandRepoImpl(IShowtimeCommandRepo):
    """
    Writes that place a showtime in a room (create, reschedule, restore) take
    the room lock and re-check overlap inside the same transaction.

    Postgres: pg_advisory_xact_lock(room_id), released at commit.
    SQLite: every transaction already starts with BEGIN IMMEDIATE.
    """

    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def create(self, *, showtime: Showtime) -> Showtime:
        async with self.session_factory() as session, session.begin():
            await self._claim_room(
                session,
                room_id=showtime.room_id,
                starts_at=showtime.starts_at,
                ends_at=showtime.ends_at,
            )
            session.add(
                ShowtimeModel(
                    id=showtime.id,
                    room_id=showtime.room_id,
                    title_id=showtime.title_id,
                    show_date=showtime.show_date,
                    starts_at=showtime.starts_at,
                    ends_at=showtime.ends_at,
                    status=showtime.status.value,
                    language=showtime.language,
                    subtitle=showtime.subtitle,
                    created_at=showtime.created_at,
                    updated_at=showtime.updated_at,
                )
            )
        return showtime

    @Logger.io
    async def get_by_id(self, *, showtime_id: UUID) -> Showtime | None:
        async with self.session_factory() as session:
            db_showtime = await session.get(ShowtimeModel, showtime_id)
            return to_showtime_entity(db_showtime) if db_showtime else None

    @Logger.io
    async def update_schedule(self, *, showtime: Showtime) -> bool:
        async with self.session_factory() as session, session.begin():
            await self._claim_room(
                session,
                room_id=showtime.room_id,
                starts_at=showtime.starts_at,
                ends_at=showtime.ends_at,
                exclude_id=showtime.id,
            )
            result = await session.execute(
                update(ShowtimeModel)
                .where(
                    ShowtimeModel.id == showtime.id,
                    ShowtimeModel.status == ShowtimeStatus.SCHEDULED.value,
                )
                .values(
                    room_id=showtime.room_id,
                    title_id=showtime.title_id,
                    show_date=showtime.show_date,
                    starts_at=showtime.starts_at,
                    ends_at=showtime.ends_at,
                    language=showtime.language,
                    subtitle=showtime.subtitle,
                    updated_at=showtime.updated_at,
                )
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def transition_status(
        self,
        *,
        showtime_id: UUID,
        from_status: ShowtimeStatus,
        to_status: ShowtimeStatus,
        now: datetime,
    ) -> bool:
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                update(ShowtimeModel)
                .where(ShowtimeModel.id == showtime_id, ShowtimeModel.status == from_status.value)
                .values(status=to_status.value, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def list_ids_due_for_completion(self, *, now: datetime) -> list[UUID]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(ShowtimeModel.id).where(
                    ShowtimeModel.status == ShowtimeStatus.SCHEDULED.value,
                    ShowtimeModel.ends_at <= now,
                )
            )
            return list(result.scalars().all())

    @Logger.io
    async def soft_delete(self, *, showtime_id: UUID, now: datetime) -> bool:
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                update(ShowtimeModel)
                .where(ShowtimeModel.id == showtime_id, ShowtimeModel.deleted_at.is_(None))
                .values(deleted_at=now, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def restore(self, *, showtime_id: UUID, now: datetime) -> bool:
        async with self.session_factory() as session, session.begin():
            db_showtime = await session.get(ShowtimeModel, showtime_id)
            if db_showtime is None or db_showtime.deleted_at is None:
                return False
            await self._claim_room(
                session,
                room_id=db_showtime.room_id,
                starts_at=db_showtime.starts_at,
                ends_at=db_showtime.ends_at,
                exclude_id=showtime_id,
            )
            result = await session.execute(
                update(ShowtimeModel)
                .where(ShowtimeModel.id == showtime_id, ShowtimeModel.deleted_at.is_not(None))
                .values(deleted_at=None, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1  # type: ignore[attr-defined]

    async def _claim_room(
        self,
        session: AsyncSession,
        *,
        room_id: int,
        starts_at: datetime,
        ends_at: datetime,
        exclude_id: UUID | None = None,
    ) -> None:
        """Serialize writers of one room, then reject [starts_at, ends_at) if it is taken."""
        connection = await session.connection()
        if connection.dialect.name == 'postgresql':
            await session.execute(select(func.pg_advisory_xact_lock(room_id)))

        stmt = select(ShowtimeModel).where(
            ShowtimeModel.room_id == room_id,
            ShowtimeModel.status != ShowtimeStatus.CANCELLED.value,
            ShowtimeModel.deleted_at.is_(None),
            ShowtimeModel.starts_at < ends_at,
            ShowtimeModel.ends_at > starts_at,
        )
        if exclude_id is not None:
            stmt = stmt.where(ShowtimeModel.id != exclude_id)

        result = await session.execute(stmt.order_by(ShowtimeModel.starts_at))
        overlapping = result.scalars().all()
        if overlapping:
            raise OverlapConflictError(
                room_id=room_id,
                conflicts=[(row.id, row.starts_at, row.ends_at) for row in overlapping],
            )
