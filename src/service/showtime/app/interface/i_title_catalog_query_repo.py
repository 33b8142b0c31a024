from abc import ABC, abstractmethod

from src.service.showtime.domain.entity.showtime_entity import Title


class ITitleCatalogQueryRepo(ABC):
    """Read-only port onto the catalog collaborator's title data"""

    @abstractmethod
    async def get_by_id(self, *, title_id: int) -> Title | None:
        pass
