from datetime import datetime
from typing import List, Optional

import attrs
from uuid_utils import UUID, uuid7

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus, PaymentStatus
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    BookingExpiredError,
    InvalidStateError,
)


@attrs.define
class Booking:
    id: UUID
    customer_id: int
    showtime_id: UUID
    seat_ids: List[str]
    total_price: int
    reference_code: str
    hold_expires_at: datetime
    booking_status: BookingStatus = BookingStatus.CONFIRMED
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_ref: Optional[str] = None
    cancel_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @property
    def seat_count(self) -> int:
        return len(self.seat_ids)

    @property
    def is_active(self) -> bool:
        """Confirmed and still waiting for payment"""
        return (
            self.booking_status == BookingStatus.CONFIRMED
            and self.payment_status == PaymentStatus.PENDING
        )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        customer_id: int,
        showtime_id: UUID,
        seat_ids: List[str],
        total_price: int,
        reference_code: str,
        hold_expires_at: datetime,
        now: datetime,
    ) -> 'Booking':
        if not seat_ids:
            raise DomainError('A booking needs at least one seat')
        if total_price < 0:
            raise DomainError('total_price must not be negative')

        return cls(
            id=uuid7(),
            customer_id=customer_id,
            showtime_id=showtime_id,
            seat_ids=list(seat_ids),
            total_price=total_price,
            reference_code=reference_code,
            hold_expires_at=hold_expires_at,
            booking_status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    def is_hold_expired(self, *, now: datetime) -> bool:
        return self.hold_expires_at < now

    def validate_can_be_paid(self, *, now: datetime) -> None:
        if not self.is_active:
            raise InvalidStateError(
                f'Booking is {self.booking_status}/{self.payment_status}, payment not allowed'
            )
        if self.is_hold_expired(now=now):
            raise BookingExpiredError(booking_id=self.id)

    def validate_can_be_cancelled(self) -> None:
        if self.payment_status == PaymentStatus.COMPLETED:
            raise InvalidStateError('Paid bookings cannot be cancelled by the customer')
        if self.booking_status == BookingStatus.CANCELLED:
            raise InvalidStateError('Booking is already cancelled')
        if self.booking_status != BookingStatus.CONFIRMED:
            raise InvalidStateError(f'Booking is {self.booking_status}, cannot cancel')

    def validate_can_be_extended(self, *, now: datetime) -> None:
        if not self.is_active:
            raise InvalidStateError(f'Booking is {self.booking_status}, hold cannot be extended')
        if self.is_hold_expired(now=now):
            raise BookingExpiredError(booking_id=self.id)

    @Logger.io
    def mark_as_completed(self, *, payment_ref: str, now: datetime) -> 'Booking':
        return attrs.evolve(
            self,
            booking_status=BookingStatus.COMPLETED,
            payment_status=PaymentStatus.COMPLETED,
            payment_ref=payment_ref,
            paid_at=now,
            updated_at=now,
        )

    @Logger.io
    def cancel(self, *, reason: str, now: datetime) -> 'Booking':
        """Unpaid bookings end with payment FAILED; paid ones keep COMPLETED for refunds."""
        payment_status = (
            PaymentStatus.FAILED
            if self.payment_status == PaymentStatus.PENDING
            else self.payment_status
        )
        return attrs.evolve(
            self,
            booking_status=BookingStatus.CANCELLED,
            payment_status=payment_status,
            cancel_reason=reason,
            cancelled_at=now,
            updated_at=now,
        )
