from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.booking.domain.entity.booking_entity import Booking


class BookingCreateRequest(BaseModel):
    showtime_id: UtilsUUID7
    seat_ids: List[str] = Field(min_length=1)
    total_price: int = Field(ge=0)
    hold_ids: Optional[List[UtilsUUID7]] = None  # holds already locked via /api/seat_hold

    @field_validator('seat_ids', 'hold_ids')
    @classmethod
    def no_duplicates(cls, v: Optional[list]) -> Optional[list]:
        if v is not None and len(set(v)) != len(v):
            raise ValueError('must not contain duplicates')
        return v

    class Config:
        json_schema_extra = {
            'example': {
                'showtime_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'seat_ids': ['A1', 'A2'],
                'total_price': 2400,
            }
        }


class PaymentConfirmRequest(BaseModel):
    payment_ref: str = Field(min_length=1, max_length=128)

    class Config:
        json_schema_extra = {'example': {'payment_ref': 'pi_3PqK2nLx8e'}}


class BookingResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'customer_id': 1,
                'showtime_id': '01936d8f-5e73-7c4e-a9c5-987654321cba',
                'seat_ids': ['A1', 'A2'],
                'seat_count': 2,
                'total_price': 2400,
                'booking_status': 'confirmed',
                'payment_status': 'pending',
                'reference_code': 'K7Q2M9XA',
                'hold_expires_at': '2025-06-01T19:15:00Z',
            }
        },
    }

    id: UtilsUUID7  # UUID7
    customer_id: int
    showtime_id: UtilsUUID7
    seat_ids: List[str]
    seat_count: int
    total_price: int
    booking_status: str
    payment_status: str
    reference_code: str
    hold_expires_at: datetime
    payment_ref: Optional[str] = None
    cancel_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingResponse':
        return cls(
            id=booking.id,
            customer_id=booking.customer_id,
            showtime_id=booking.showtime_id,
            seat_ids=booking.seat_ids,
            seat_count=booking.seat_count,
            total_price=booking.total_price,
            booking_status=booking.booking_status.value,
            payment_status=booking.payment_status.value,
            reference_code=booking.reference_code,
            hold_expires_at=booking.hold_expires_at,
            payment_ref=booking.payment_ref,
            cancel_reason=booking.cancel_reason,
            created_at=booking.created_at,
            paid_at=booking.paid_at,
            cancelled_at=booking.cancelled_at,
            deleted_at=booking.deleted_at,
        )
