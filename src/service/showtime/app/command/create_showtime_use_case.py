from datetime import datetime
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.showtime.app.interface.i_showtime_command_repo import IShowtimeCommandRepo
from src.service.showtime.app.interface.i_title_catalog_query_repo import (
    ITitleCatalogQueryRepo,
)
from src.service.showtime.domain.entity.showtime_entity import Showtime


class CreateShowtimeUseCase:
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
    async def create(
        self,
        *,
        room_id: int,
        title_id: int,
        starts_at: datetime,
        language: Optional[str] = None,
        subtitle: Optional[str] = None,
    ) -> Showtime:
        title = await self.title_catalog_query_repo.get_by_id(title_id=title_id)
        if not title:
            raise NotFoundError('Title not found')

        showtime = Showtime.create(
            room_id=room_id,
            title=title,
            starts_at=starts_at,
            now=self.clock.now(),
            language=language,
            subtitle=subtitle,
        )
        created = await self.showtime_command_repo.create(showtime=showtime)
        Logger.base.info(
            f'🎬 [SHOWTIME] Created {created.id} in room {room_id} '
            f'{created.starts_at.isoformat()} - {created.ends_at.isoformat()}'
        )
        return created
