from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.seat_hold.domain.entity.seat_hold_entity import SeatHold


class SeatHoldAcquireRequest(BaseModel):
    showtime_id: UtilsUUID7
    seat_ids: List[str] = Field(min_length=1)

    class Config:
        json_schema_extra = {
            'example': {
                'showtime_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'seat_ids': ['A1', 'A2'],
            }
        }


class SeatHoldExtendRequest(BaseModel):
    hold_ids: List[UtilsUUID7] = Field(min_length=1)


class SeatHoldResponse(BaseModel):
    id: UtilsUUID7  # UUID7
    showtime_id: UtilsUUID7
    seat_id: str
    status: str
    lock_expires_at: Optional[datetime] = None
    booking_id: Optional[UtilsUUID7] = None

    @classmethod
    def from_entity(cls, hold: SeatHold) -> 'SeatHoldResponse':
        return cls(
            id=hold.id,
            showtime_id=hold.showtime_id,
            seat_id=hold.seat_id,
            status=hold.status.value,
            lock_expires_at=hold.lock_expires_at,
            booking_id=hold.booking_id,
        )


class SeatMapEntryResponse(BaseModel):
    seat_id: str
    status: str  # locked/booked; seats not listed are available
    lock_expires_at: Optional[datetime] = None


class SeatMapResponse(BaseModel):
    showtime_id: UtilsUUID7
    seats: List[SeatMapEntryResponse]


class SeatHoldHistoryResponse(BaseModel):
    id: UtilsUUID7
    showtime_id: UtilsUUID7
    seat_id: str
    booking_id: Optional[UtilsUUID7] = None
    action: str
    created_at: Optional[datetime] = None
