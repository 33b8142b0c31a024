from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.platform.constant.route_constant import (
    BOOKING_CANCEL,
    BOOKING_CREATE,
    BOOKING_DELETE,
    BOOKING_EXTEND,
    BOOKING_GET,
    BOOKING_GET_BY_REFERENCE,
    BOOKING_LIST,
    BOOKING_PAY,
    BOOKING_RESTORE,
)
from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.command.confirm_payment_use_case import ConfirmPaymentUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.command.extend_booking_hold_use_case import (
    ExtendBookingHoldUseCase,
)
from src.service.booking.app.command.soft_delete_booking_use_case import (
    SoftDeleteBookingUseCase,
)
from src.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from src.service.booking.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingResponse,
    PaymentConfirmRequest,
)
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus
from src.service.shared_kernel.driving_adapter.http_controller.customer_identity import (
    get_current_customer_id,
)


router = APIRouter()


@router.post(BOOKING_CREATE, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    customer_id: int = Depends(get_current_customer_id),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.create_booking(
        customer_id=customer_id,
        showtime_id=request.showtime_id,
        seat_ids=request.seat_ids,
        total_price=request.total_price,
        hold_ids=list(request.hold_ids) if request.hold_ids else None,
    )
    return BookingResponse.from_entity(booking)


@router.get(BOOKING_LIST, status_code=status.HTTP_200_OK)
@Logger.io
async def list_bookings(
    booking_status: Optional[BookingStatus] = None,
    include_deleted: bool = False,
    customer_id: int = Depends(get_current_customer_id),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_bookings(
        customer_id=customer_id, booking_status=booking_status, include_deleted=include_deleted
    )
    return [BookingResponse.from_entity(b) for b in bookings]


@router.get(BOOKING_GET_BY_REFERENCE, status_code=status.HTTP_200_OK)
@Logger.io
async def get_booking_by_reference(
    reference_code: str,
    customer_id: int = Depends(get_current_customer_id),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.get_by_reference(
        reference_code=reference_code, customer_id=customer_id
    )
    return BookingResponse.from_entity(booking)


@router.get(BOOKING_GET, status_code=status.HTTP_200_OK)
@Logger.io
async def get_booking(
    booking_id: UtilsUUID7,
    customer_id: int = Depends(get_current_customer_id),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.get_booking(booking_id=booking_id, customer_id=customer_id)
    return BookingResponse.from_entity(booking)


@router.post(BOOKING_PAY, status_code=status.HTTP_200_OK)
@Logger.io
async def confirm_payment(
    booking_id: UtilsUUID7,
    request: PaymentConfirmRequest,
    use_case: ConfirmPaymentUseCase = Depends(ConfirmPaymentUseCase.depends),
) -> BookingResponse:
    """Called by the payment collaborator after settlement, not by the customer."""
    booking = await use_case.confirm_payment(booking_id=booking_id, payment_ref=request.payment_ref)
    return BookingResponse.from_entity(booking)


@router.patch(BOOKING_CANCEL, status_code=status.HTTP_200_OK)
@Logger.io
async def cancel_booking(
    booking_id: UtilsUUID7,
    customer_id: int = Depends(get_current_customer_id),
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.cancel_booking(booking_id=booking_id, customer_id=customer_id)
    return BookingResponse.from_entity(booking)


@router.patch(BOOKING_EXTEND, status_code=status.HTTP_200_OK)
@Logger.io
async def extend_booking_hold(
    booking_id: UtilsUUID7,
    customer_id: int = Depends(get_current_customer_id),
    use_case: ExtendBookingHoldUseCase = Depends(ExtendBookingHoldUseCase.depends),
) -> BookingResponse:
    booking = await use_case.extend_hold(booking_id=booking_id, customer_id=customer_id)
    return BookingResponse.from_entity(booking)


@router.delete(BOOKING_DELETE, status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_booking(
    booking_id: UtilsUUID7,
    customer_id: int = Depends(get_current_customer_id),
    use_case: SoftDeleteBookingUseCase = Depends(SoftDeleteBookingUseCase.depends),
) -> None:
    await use_case.delete(booking_id=booking_id, customer_id=customer_id)


@router.post(BOOKING_RESTORE, status_code=status.HTTP_200_OK)
@Logger.io
async def restore_booking(
    booking_id: UtilsUUID7,
    customer_id: int = Depends(get_current_customer_id),
    use_case: SoftDeleteBookingUseCase = Depends(SoftDeleteBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.restore(booking_id=booking_id, customer_id=customer_id)
    return BookingResponse.from_entity(booking)
