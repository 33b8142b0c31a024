from typing import AsyncContextManager, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.showtime.app.interface.i_title_catalog_query_repo import (
    ITitleCatalogQueryRepo,
)
from src.service.showtime.domain.entity.showtime_entity import Title
from src.service.showtime.driven_adapter.model.title_model import TitleModel


class TitleCatalogQueryRepoImpl(ITitleCatalogQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, *, title_id: int) -> Title | None:
        async with self.session_factory() as session:
            db_title = await session.get(TitleModel, title_id)
            if db_title is None:
                return None
            return Title(
                id=db_title.id, name=db_title.name, duration_minutes=db_title.duration_minutes
            )
