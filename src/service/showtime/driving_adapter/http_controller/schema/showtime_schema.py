from datetime import date, datetime
from typing import Optional

from pydantic import AwareDatetime, BaseModel, Field

from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.showtime.domain.entity.showtime_entity import Showtime


class ShowtimeCreateRequest(BaseModel):
    room_id: int = Field(gt=0)
    title_id: int = Field(gt=0)
    starts_at: AwareDatetime
    language: Optional[str] = None
    subtitle: Optional[str] = None

    class Config:
        json_schema_extra = {
            'example': {
                'room_id': 1,
                'title_id': 42,
                'starts_at': '2025-06-01T19:30:00Z',
                'language': 'en',
                'subtitle': 'zh-TW',
            }
        }


class ShowtimeUpdateRequest(BaseModel):
    """Omitted fields are left unchanged"""

    room_id: Optional[int] = Field(default=None, gt=0)
    title_id: Optional[int] = Field(default=None, gt=0)
    starts_at: Optional[AwareDatetime] = None
    language: Optional[str] = None
    subtitle: Optional[str] = None

    class Config:
        json_schema_extra = {'example': {'starts_at': '2025-06-01T21:00:00Z'}}


class ShowtimeResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'room_id': 1,
                'title_id': 42,
                'show_date': '2025-06-01',
                'starts_at': '2025-06-01T19:30:00Z',
                'ends_at': '2025-06-01T21:40:00Z',
                'status': 'scheduled',
                'language': 'en',
                'subtitle': 'zh-TW',
            }
        },
    }

    id: UtilsUUID7  # UUID7
    room_id: int
    title_id: int
    show_date: date
    starts_at: datetime
    ends_at: datetime
    status: str
    language: Optional[str] = None
    subtitle: Optional[str] = None
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, showtime: Showtime) -> 'ShowtimeResponse':
        return cls(
            id=showtime.id,
            room_id=showtime.room_id,
            title_id=showtime.title_id,
            show_date=showtime.show_date,
            starts_at=showtime.starts_at,
            ends_at=showtime.ends_at,
            status=showtime.status.value,
            language=showtime.language,
            subtitle=showtime.subtitle,
            deleted_at=showtime.deleted_at,
        )
