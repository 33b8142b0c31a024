from datetime import datetime
from typing import AsyncContextManager, Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus
from src.service.showtime.app.interface.i_showtime_query_repo import IShowtimeQueryRepo
from src.service.showtime.domain.entity.showtime_entity import Showtime
from src.service.showtime.driven_adapter.model.showtime_model import ShowtimeModel
from src.service.showtime.driven_adapter.repo.showtime_command_repo_impl import (
    to_showtime_entity,
)


class ShowtimeQueryRepoImpl(IShowtimeQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, *, showtime_id: UUID) -> Showtime | None:
        async with self.session_factory() as session:
            db_showtime = await session.get(ShowtimeModel, showtime_id)
            return to_showtime_entity(db_showtime) if db_showtime else None

    @Logger.io
    async def list_showtimes(
        self,
        *,
        room_id: int | None = None,
        status: ShowtimeStatus | None = None,
        starts_from: datetime | None = None,
        starts_until: datetime | None = None,
        include_deleted: bool = False,
    ) -> list[Showtime]:
        stmt = select(ShowtimeModel)
        if room_id is not None:
            stmt = stmt.where(ShowtimeModel.room_id == room_id)
        if status is not None:
            stmt = stmt.where(ShowtimeModel.status == status.value)
        if starts_from is not None:
            stmt = stmt.where(ShowtimeModel.starts_at >= starts_from)
        if starts_until is not None:
            stmt = stmt.where(ShowtimeModel.starts_at < starts_until)
        if not include_deleted:
            stmt = stmt.where(ShowtimeModel.deleted_at.is_(None))

        async with self.session_factory() as session:
            result = await session.execute(
                stmt.order_by(ShowtimeModel.starts_at, ShowtimeModel.room_id)
            )
            return [to_showtime_entity(row) for row in result.scalars().all()]
