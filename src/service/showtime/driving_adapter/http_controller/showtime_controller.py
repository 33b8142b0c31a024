from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.platform.constant.route_constant import (
    SHOWTIME_CANCEL,
    SHOWTIME_CREATE,
    SHOWTIME_DELETE,
    SHOWTIME_GET,
    SHOWTIME_LIST,
    SHOWTIME_RESTORE,
    SHOWTIME_UPDATE,
)
from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus
from src.service.showtime.app.command.cancel_showtime_use_case import CancelShowtimeUseCase
from src.service.showtime.app.command.create_showtime_use_case import CreateShowtimeUseCase
from src.service.showtime.app.command.soft_delete_showtime_use_case import (
    SoftDeleteShowtimeUseCase,
)
from src.service.showtime.app.command.update_showtime_use_case import UpdateShowtimeUseCase
from src.service.showtime.app.query.get_showtime_use_case import GetShowtimeUseCase
from src.service.showtime.app.query.list_showtimes_use_case import ListShowtimesUseCase
from src.service.showtime.driving_adapter.http_controller.schema.showtime_schema import (
    ShowtimeCreateRequest,
    ShowtimeResponse,
    ShowtimeUpdateRequest,
)


router = APIRouter()


@router.post(SHOWTIME_CREATE, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_showtime(
    request: ShowtimeCreateRequest,
    use_case: CreateShowtimeUseCase = Depends(CreateShowtimeUseCase.depends),
) -> ShowtimeResponse:
    showtime = await use_case.create(
        room_id=request.room_id,
        title_id=request.title_id,
        starts_at=request.starts_at,
        language=request.language,
        subtitle=request.subtitle,
    )
    return ShowtimeResponse.from_entity(showtime)


@router.get(SHOWTIME_LIST, status_code=status.HTTP_200_OK)
@Logger.io
async def list_showtimes(
    room_id: Optional[int] = None,
    showtime_status: Optional[ShowtimeStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    use_case: ListShowtimesUseCase = Depends(ListShowtimesUseCase.depends),
) -> List[ShowtimeResponse]:
    showtimes = await use_case.list_showtimes(
        room_id=room_id, status=showtime_status, date_from=date_from, date_to=date_to
    )
    return [ShowtimeResponse.from_entity(s) for s in showtimes]


@router.get(SHOWTIME_GET, status_code=status.HTTP_200_OK)
@Logger.io
async def get_showtime(
    showtime_id: UtilsUUID7,
    use_case: GetShowtimeUseCase = Depends(GetShowtimeUseCase.depends),
) -> ShowtimeResponse:
    showtime = await use_case.get_showtime(showtime_id=showtime_id)
    return ShowtimeResponse.from_entity(showtime)


@router.patch(SHOWTIME_UPDATE, status_code=status.HTTP_200_OK)
@Logger.io
async def update_showtime(
    showtime_id: UtilsUUID7,
    request: ShowtimeUpdateRequest,
    use_case: UpdateShowtimeUseCase = Depends(UpdateShowtimeUseCase.depends),
) -> ShowtimeResponse:
    showtime = await use_case.update(
        showtime_id=showtime_id,
        room_id=request.room_id,
        title_id=request.title_id,
        starts_at=request.starts_at,
        language=request.language,
        subtitle=request.subtitle,
    )
    return ShowtimeResponse.from_entity(showtime)


@router.patch(SHOWTIME_CANCEL, status_code=status.HTTP_200_OK)
@Logger.io
async def cancel_showtime(
    showtime_id: UtilsUUID7,
    use_case: CancelShowtimeUseCase = Depends(CancelShowtimeUseCase.depends),
) -> ShowtimeResponse:
    showtime = await use_case.cancel(showtime_id=showtime_id)
    return ShowtimeResponse.from_entity(showtime)


@router.delete(SHOWTIME_DELETE, status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_showtime(
    showtime_id: UtilsUUID7,
    use_case: SoftDeleteShowtimeUseCase = Depends(SoftDeleteShowtimeUseCase.depends),
) -> None:
    await use_case.delete(showtime_id=showtime_id)


@router.post(SHOWTIME_RESTORE, status_code=status.HTTP_200_OK)
@Logger.io
async def restore_showtime(
    showtime_id: UtilsUUID7,
    use_case: SoftDeleteShowtimeUseCase = Depends(SoftDeleteShowtimeUseCase.depends),
) -> ShowtimeResponse:
    showtime = await use_case.restore(showtime_id=showtime_id)
    return ShowtimeResponse.from_entity(showtime)
