from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.platform.constant.route_constant import (
    SEAT_HOLD_ACQUIRE,
    SEAT_HOLD_EXTEND,
    SEAT_HOLD_HISTORY,
    SEAT_HOLD_SEAT_MAP,
)
from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.seat_hold.app.command.acquire_seat_holds_use_case import (
    AcquireSeatHoldsUseCase,
)
from src.service.seat_hold.app.command.extend_seat_holds_use_case import ExtendSeatHoldsUseCase
from src.service.seat_hold.app.query.get_seat_map_use_case import GetSeatMapUseCase
from src.service.seat_hold.app.query.list_seat_hold_history_use_case import (
    ListSeatHoldHistoryUseCase,
)
from src.service.seat_hold.driving_adapter.http_controller.schema.seat_hold_schema import (
    SeatHoldAcquireRequest,
    SeatHoldExtendRequest,
    SeatHoldHistoryResponse,
    SeatHoldResponse,
    SeatMapEntryResponse,
    SeatMapResponse,
)
from src.service.shared_kernel.driving_adapter.http_controller.customer_identity import (
    get_current_customer_id,
)


router = APIRouter()


@router.post(SEAT_HOLD_ACQUIRE, status_code=status.HTTP_201_CREATED)
@Logger.io
async def acquire_seat_holds(
    request: SeatHoldAcquireRequest,
    customer_id: int = Depends(get_current_customer_id),
    use_case: AcquireSeatHoldsUseCase = Depends(AcquireSeatHoldsUseCase.depends),
) -> List[SeatHoldResponse]:
    holds = await use_case.execute(showtime_id=request.showtime_id, seat_ids=request.seat_ids)
    return [SeatHoldResponse.from_entity(hold) for hold in holds]


@router.patch(SEAT_HOLD_EXTEND, status_code=status.HTTP_200_OK)
@Logger.io
async def extend_seat_holds(
    request: SeatHoldExtendRequest,
    customer_id: int = Depends(get_current_customer_id),
    use_case: ExtendSeatHoldsUseCase = Depends(ExtendSeatHoldsUseCase.depends),
) -> List[SeatHoldResponse]:
    holds = await use_case.execute(hold_ids=list(request.hold_ids))
    return [SeatHoldResponse.from_entity(hold) for hold in holds]


@router.get(SEAT_HOLD_SEAT_MAP, status_code=status.HTTP_200_OK)
@Logger.io
async def get_seat_map(
    showtime_id: UtilsUUID7,
    use_case: GetSeatMapUseCase = Depends(GetSeatMapUseCase.depends),
) -> SeatMapResponse:
    entries = await use_case.execute(showtime_id=showtime_id)
    return SeatMapResponse(
        showtime_id=showtime_id,
        seats=[
            SeatMapEntryResponse(
                seat_id=e.seat_id, status=e.status.value, lock_expires_at=e.lock_expires_at
            )
            for e in entries
        ],
    )


@router.get(SEAT_HOLD_HISTORY, status_code=status.HTTP_200_OK)
@Logger.io
async def list_seat_hold_history(
    showtime_id: Optional[UtilsUUID7] = None,
    booking_id: Optional[UtilsUUID7] = None,
    use_case: ListSeatHoldHistoryUseCase = Depends(ListSeatHoldHistoryUseCase.depends),
) -> List[SeatHoldHistoryResponse]:
    rows = await use_case.execute(showtime_id=showtime_id, booking_id=booking_id)
    return [
        SeatHoldHistoryResponse(
            id=row.id,
            showtime_id=row.showtime_id,
            seat_id=row.seat_id,
            booking_id=row.booking_id,
            action=row.action.value,
            created_at=row.created_at,
        )
        for row in rows
    ]
