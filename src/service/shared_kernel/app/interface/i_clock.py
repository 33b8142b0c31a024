from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """Source of the current time; every lease and expiry comparison goes through it"""

    @abstractmethod
    def now(self) -> datetime:
        """Timezone-aware UTC now"""
        pass
