from datetime import timedelta

from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.seat_hold.app.interface.i_seat_hold_command_repo import ISeatHoldCommandRepo
from src.service.seat_hold.domain.entity.seat_hold_entity import SeatHold
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.enum.seat_hold_status import SeatHoldStatus
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    LockAlreadyConsumedError,
    LockExpiredError,
    NotLockedError,
    SeatUnavailableError,
)


tracer = trace.get_tracer(__name__)


class SeatHoldStore:
    """
    Issues, extends, commits and releases time-leased seat holds.

    Correctness rests on the (showtime_id, seat_id) unique key and on
    conditional writes in the repository; no in-process locks are taken, so
    any number of API replicas may call this concurrently.

    Flow of a successful checkout:
    1. acquire: one LOCKED row per seat, lock_expires_at = now + lease
    2. commit: LOCKED -> BOOKED once a booking exists
    3. release: rows deleted when the booking is cancelled
    """

    def __init__(self, *, seat_hold_command_repo: ISeatHoldCommandRepo, clock: IClock) -> None:
        self.seat_hold_command_repo = seat_hold_command_repo
        self.clock = clock

    @Logger.io
    async def acquire(
        self, *, showtime_id: UUID, seat_ids: list[str], lease: timedelta
    ) -> list[SeatHold]:
        """
        All-or-nothing: every seat is locked, or none is and SeatUnavailableError
        names each seat that could not be taken.
        """
        self._validate_seat_ids(seat_ids)
        now = self.clock.now()
        acquired: list[SeatHold] = []
        unavailable: list[str] = []

        with tracer.start_as_current_span(
            'seat_hold.acquire',
            attributes={'showtime.id': str(showtime_id), 'seat.count': len(seat_ids)},
        ):
            try:
                for seat_id in seat_ids:
                    hold = SeatHold.lock(
                        showtime_id=showtime_id, seat_id=seat_id, now=now, lease=lease
                    )
                    if await self.seat_hold_command_repo.lock_seat(hold=hold, now=now) is None:
                        unavailable.append(seat_id)
                    else:
                        acquired.append(hold)
            except Exception:
                await self._compensate(acquired)
                raise

            if unavailable:
                await self._compensate(acquired)
                metrics.record_seat_hold(result='unavailable', seat_count=len(seat_ids))
                raise SeatUnavailableError(showtime_id=showtime_id, seat_ids=unavailable)

        metrics.record_seat_hold(result='acquired', seat_count=len(seat_ids))
        Logger.base.info(f'🔒 [SEAT_HOLD] Locked {seat_ids} for showtime {showtime_id}')
        return acquired

    @Logger.io
    async def extend(
        self, *, hold_ids: list[UUID], additional: timedelta, booking_id: UUID | None = None
    ) -> list[SeatHold]:
        """
        Not all-or-nothing: holds that can be extended are, then NotLockedError
        lists the ones that were booked, already gone or not owned by booking_id
        (loose holds only when booking_id is None).
        """
        now = self.clock.now()
        lock_expires_at = now + additional
        failed: list[UUID] = []
        for hold_id in hold_ids:
            extended = await self.seat_hold_command_repo.extend_lock(
                hold_id=hold_id, now=now, lock_expires_at=lock_expires_at, booking_id=booking_id
            )
            if not extended:
                failed.append(hold_id)

        if failed:
            raise NotLockedError(hold_ids=failed)
        return await self.seat_hold_command_repo.get_by_ids(hold_ids=hold_ids)

    @Logger.io
    async def commit(self, *, hold_ids: list[UUID], booking_id: UUID) -> None:
        now = self.clock.now()
        failed = await self.seat_hold_command_repo.commit_to_booking(
            hold_ids=hold_ids, booking_id=booking_id, now=now
        )
        if not failed:
            return

        # Classify: rows already booked/attached were consumed, the rest expired or vanished
        current = {
            hold.id: hold for hold in await self.seat_hold_command_repo.get_by_ids(hold_ids=failed)
        }
        consumed = [
            hold_id
            for hold_id in failed
            if hold_id in current
            and (
                current[hold_id].status == SeatHoldStatus.BOOKED
                or current[hold_id].booking_id is not None
            )
        ]
        if consumed:
            raise LockAlreadyConsumedError(hold_ids=consumed)
        raise LockExpiredError(hold_ids=failed)

    @Logger.io
    async def commit_attached_locks(self, *, booking_id: UUID) -> int:
        """Repair path: holds already pointing at a paid booking but still LOCKED."""
        return await self.seat_hold_command_repo.commit_attached_locks(
            booking_id=booking_id, now=self.clock.now()
        )

    @Logger.io
    async def get_holds(self, *, hold_ids: list[UUID]) -> list[SeatHold]:
        return await self.seat_hold_command_repo.get_by_ids(hold_ids=hold_ids)

    @Logger.io
    async def release(self, *, booking_id: UUID) -> int:
        return await self.seat_hold_command_repo.release_by_booking(
            booking_id=booking_id, now=self.clock.now()
        )

    @Logger.io
    async def release_holds(self, *, hold_ids: list[UUID]) -> int:
        """Drop caller-owned locks that never got attached to a booking."""
        return await self.seat_hold_command_repo.delete_by_ids(hold_ids=hold_ids)

    @Logger.io
    async def release_drifted(self, *, hold_ids: list[UUID]) -> int:
        """Repair path: drop holds whose booking no longer owns them."""
        return await self.seat_hold_command_repo.release_by_ids(
            hold_ids=hold_ids, now=self.clock.now()
        )

    @Logger.io
    async def purge_expired_locks(self) -> int:
        purged = await self.seat_hold_command_repo.purge_expired_locks(now=self.clock.now())
        if purged:
            Logger.base.info(f'🧹 [SEAT_HOLD] Purged {purged} expired locks')
        return purged

    @Logger.io
    async def purge_by_showtime(self, *, showtime_id: UUID) -> int:
        return await self.seat_hold_command_repo.purge_by_showtime(
            showtime_id=showtime_id, now=self.clock.now()
        )

    async def _compensate(self, acquired: list[SeatHold]) -> None:
        if acquired:
            await self.seat_hold_command_repo.delete_by_ids(hold_ids=[h.id for h in acquired])

    @staticmethod
    def _validate_seat_ids(seat_ids: list[str]) -> None:
        if not seat_ids:
            raise DomainError('At least one seat must be selected')
        if len(seat_ids) > settings.MAX_SEATS_PER_HOLD:
            raise DomainError(f'Maximum {settings.MAX_SEATS_PER_HOLD} seats per request')
        if len(set(seat_ids)) != len(seat_ids):
            raise DomainError('Duplicate seats in request')
