from datetime import date, datetime, timedelta
from typing import Optional

import attrs
from uuid_utils import UUID, uuid7

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    InThePastError,
    InvalidStateError,
)


def derive_end_time(*, starts_at: datetime, duration_minutes: int) -> datetime:
    return starts_at + timedelta(minutes=duration_minutes)


@attrs.define
class Title:
    """Catalog reference data; only read by the reservation engine"""

    id: int
    name: str
    duration_minutes: int


@attrs.define
class Showtime:
    id: UUID
    room_id: int
    title_id: int
    starts_at: datetime
    ends_at: datetime
    status: ShowtimeStatus = ShowtimeStatus.SCHEDULED
    language: Optional[str] = None
    subtitle: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @property
    def show_date(self) -> date:
        return self.starts_at.date()

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        room_id: int,
        title: Title,
        starts_at: datetime,
        now: datetime,
        language: Optional[str] = None,
        subtitle: Optional[str] = None,
    ) -> 'Showtime':
        ends_at = derive_end_time(starts_at=starts_at, duration_minutes=title.duration_minutes)
        if ends_at <= now:
            raise InThePastError()
        return cls(
            id=uuid7(),
            room_id=room_id,
            title_id=title.id,
            starts_at=starts_at,
            ends_at=ends_at,
            status=ShowtimeStatus.SCHEDULED,
            language=language,
            subtitle=subtitle,
            created_at=now,
            updated_at=now,
        )

    @Logger.io
    def reschedule(
        self,
        *,
        room_id: int,
        title: Title,
        starts_at: datetime,
        now: datetime,
        language: Optional[str] = None,
        subtitle: Optional[str] = None,
    ) -> 'Showtime':
        """End time is always re-derived from the (possibly new) title duration"""
        self.ensure_scheduled()
        ends_at = derive_end_time(starts_at=starts_at, duration_minutes=title.duration_minutes)
        if ends_at <= now:
            raise InThePastError()
        return attrs.evolve(
            self,
            room_id=room_id,
            title_id=title.id,
            starts_at=starts_at,
            ends_at=ends_at,
            language=language,
            subtitle=subtitle,
            updated_at=now,
        )

    def ensure_scheduled(self) -> None:
        if self.status != ShowtimeStatus.SCHEDULED:
            raise InvalidStateError(f'Showtime is {self.status}, only scheduled showtimes change')

    def is_bookable(self, *, now: datetime) -> bool:
        return (
            self.status == ShowtimeStatus.SCHEDULED
            and not self.is_deleted
            and self.starts_at > now
        )

    def overlaps(self, *, starts_at: datetime, ends_at: datetime) -> bool:
        # Half-open intervals: back-to-back showtimes do not overlap
        return self.starts_at < ends_at and starts_at < self.ends_at
