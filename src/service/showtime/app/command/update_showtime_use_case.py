from datetime import datetime
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    InvalidStateError,
)
from src.service.showtime.app.interface.i_showtime_command_repo import IShowtimeCommandRepo
from src.service.showtime.app.interface.i_title_catalog_query_repo import (
    ITitleCatalogQueryRepo,
)
from src.service.showtime.domain.entity.showtime_entity import Showtime


class UpdateShowtimeUseCase:
    """
    Partial update of a scheduled showtime.

    Omitted fields keep their current value. The end time is re-derived and
    the room re-checked for overlap in the same transaction as the write.
    """

    def __init__(
        self,
        *,
        showtime_command_repo: IShowtimeCommandRepo,
        title_catalog_query_repo: ITitleCatalogQueryRepo,
        clock: IClock,
    ) -> None:
        self.showtime_command_repo = showtime_command_repo
        self.title_catalog_query_repo = title_catalog_query_repo
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        showtime_command_repo: IShowtimeCommandRepo = Depends(
            Provide[Container.showtime_command_repo]
        ),
        title_catalog_query_repo: ITitleCatalogQueryRepo = Depends(
            Provide[Container.title_catalog_query_repo]
        ),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            showtime_command_repo=showtime_command_repo,
            title_catalog_query_repo=title_catalog_query_repo,
            clock=clock,
        )

    @Logger.io
    async def update(
        self,
        *,
        showtime_id: UUID,
        room_id: Optional[int] = None,
        title_id: Optional[int] = None,
        starts_at: Optional[datetime] = None,
        language: Optional[str] = None,
        subtitle: Optional[str] = None,
    ) -> Showtime:
        showtime = await self.showtime_command_repo.get_by_id(showtime_id=showtime_id)
        if not showtime or showtime.is_deleted:
            raise NotFoundError('Showtime not found')
        showtime.ensure_scheduled()

        title = await self.title_catalog_query_repo.get_by_id(
            title_id=title_id if title_id is not None else showtime.title_id
        )
        if not title:
            raise NotFoundError('Title not found')

        updated = showtime.reschedule(
            room_id=room_id if room_id is not None else showtime.room_id,
            title=title,
            starts_at=starts_at if starts_at is not None else showtime.starts_at,
            now=self.clock.now(),
            language=language if language is not None else showtime.language,
            subtitle=subtitle if subtitle is not None else showtime.subtitle,
        )

        if not await self.showtime_command_repo.update_schedule(showtime=updated):
            raise InvalidStateError('Showtime changed state during the update')
        return updated
