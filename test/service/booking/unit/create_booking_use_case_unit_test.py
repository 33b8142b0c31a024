"""
Unit tests for CreateBookingUseCase

Tests:
- Happy path order: acquire -> insert booking -> commit holds
- Payment deadline is the earliest lock expiry
- Compensation when the commit loses a race or the insert fails
- Showtime gate (missing, not bookable)
- Adopting holds locked beforehand (same showtime, one hold per distinct seat)
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import attrs
import pytest
from uuid_utils import uuid7

from src.platform.exception.exceptions import DomainError, NotFoundError
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.service.booking_canceller import SEAT_COMMIT_FAILED_REASON
from src.service.seat_hold.domain.entity.seat_hold_entity import SeatHold
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus, PaymentStatus
from src.service.shared_kernel.domain.enum.showtime_status import ShowtimeStatus
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    InvalidStateError,
    LockAlreadyConsumedError,
    LockExpiredError,
    SeatUnavailableError,
)
from src.service.showtime.domain.entity.showtime_entity import Showtime
from test.constants import CUSTOMER_ID, ROOM_ID, TITLE_ID
from test.fake_clock import FakeClock


LEASE = timedelta(minutes=15)


def _holds(showtime_id, seat_ids, clock: FakeClock) -> list[SeatHold]:
    return [
        SeatHold.lock(showtime_id=showtime_id, seat_id=seat_id, now=clock.now(), lease=LEASE)
        for seat_id in seat_ids
    ]


@pytest.mark.unit
class TestCreateBookingUseCase:
    @pytest.fixture
    def clock(self) -> FakeClock:
        return FakeClock()

    @pytest.fixture
    def showtime(self, clock: FakeClock) -> Showtime:
        starts_at = clock.now() + timedelta(days=1)
        return Showtime(
            id=uuid7(),
            room_id=ROOM_ID,
            title_id=TITLE_ID,
            starts_at=starts_at,
            ends_at=starts_at + timedelta(hours=2),
        )

    @pytest.fixture
    def mock_showtime_query_repo(self, showtime: Showtime) -> AsyncMock:
        repo = AsyncMock()
        repo.get_by_id = AsyncMock(return_value=showtime)
        return repo

    @pytest.fixture
    def mock_booking_command_repo(self) -> AsyncMock:
        repo = AsyncMock()
        repo.exists_reference_code = AsyncMock(return_value=False)
        repo.create = AsyncMock(side_effect=lambda *, booking: booking)
        return repo

    @pytest.fixture
    def mock_seat_hold_store(self, showtime: Showtime, clock: FakeClock) -> AsyncMock:
        store = AsyncMock()
        store.acquire = AsyncMock(
            side_effect=lambda *, showtime_id, seat_ids, lease: _holds(showtime_id, seat_ids, clock)
        )
        store.commit = AsyncMock(return_value=None)
        store.release_holds = AsyncMock(return_value=0)
        return store

    @pytest.fixture
    def mock_booking_canceller(self) -> AsyncMock:
        canceller = AsyncMock()
        canceller.cancel = AsyncMock(return_value=True)
        return canceller

    @pytest.fixture
    def use_case(
        self,
        mock_booking_command_repo: AsyncMock,
        mock_showtime_query_repo: AsyncMock,
        mock_seat_hold_store: AsyncMock,
        mock_booking_canceller: AsyncMock,
        clock: FakeClock,
    ) -> CreateBookingUseCase:
        return CreateBookingUseCase(
            booking_command_repo=mock_booking_command_repo,
            showtime_query_repo=mock_showtime_query_repo,
            seat_hold_store=mock_seat_hold_store,
            booking_canceller=mock_booking_canceller,
            clock=clock,
        )

    @pytest.mark.asyncio
    async def test_create_booking_locks_inserts_then_commits(
        self,
        use_case: CreateBookingUseCase,
        showtime: Showtime,
        mock_booking_command_repo: AsyncMock,
        mock_seat_hold_store: AsyncMock,
        clock: FakeClock,
    ):
        """
        Given: a bookable showtime with free seats
        When: creating a booking for A1, A2
        Then: booking is confirmed/pending, due when the locks expire, holds committed to it
        """
        # Arrange
        call_order: list[str] = []
        mock_seat_hold_store.acquire.side_effect = (
            lambda *, showtime_id, seat_ids, lease: call_order.append('acquire')
            or _holds(showtime_id, seat_ids, clock)
        )
        mock_booking_command_repo.create.side_effect = (
            lambda *, booking: call_order.append('insert') or booking
        )
        mock_seat_hold_store.commit.side_effect = lambda *, hold_ids, booking_id: call_order.append(
            'commit'
        )

        # Act
        booking = await use_case.create_booking(
            customer_id=CUSTOMER_ID,
            showtime_id=showtime.id,
            seat_ids=['A1', 'A2'],
            total_price=2400,
        )

        # Assert
        assert call_order == ['acquire', 'insert', 'commit']
        assert booking.booking_status == BookingStatus.CONFIRMED
        assert booking.payment_status == PaymentStatus.PENDING
        assert booking.hold_expires_at == clock.now() + LEASE
        assert len(booking.reference_code) == 8
        assert mock_seat_hold_store.commit.await_args.kwargs['booking_id'] == booking.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'commit_error',
        [
            pytest.param(LockExpiredError(hold_ids=[uuid7()]), id='lock_expired'),
            pytest.param(LockAlreadyConsumedError(hold_ids=[uuid7()]), id='taken_mid_commit'),
        ],
    )
    async def test_commit_race_lost_compensates_and_reports_unavailable(
        self,
        commit_error: Exception,
        use_case: CreateBookingUseCase,
        showtime: Showtime,
        mock_seat_hold_store: AsyncMock,
        mock_booking_canceller: AsyncMock,
    ):
        """
        Given: the locks expire, or another writer takes them, between insert and commit
        When: creating a booking
        Then: the booking is cancelled, the locks released, SeatUnavailableError raised
        """
        # Arrange
        mock_seat_hold_store.commit.side_effect = commit_error

        # Act
        with pytest.raises(SeatUnavailableError):
            await use_case.create_booking(
                customer_id=CUSTOMER_ID, showtime_id=showtime.id, seat_ids=['A1'], total_price=1200
            )

        # Assert
        mock_booking_canceller.cancel.assert_awaited_once()
        cancel_kwargs = mock_booking_canceller.cancel.await_args.kwargs
        assert cancel_kwargs['reason'] == SEAT_COMMIT_FAILED_REASON
        mock_seat_hold_store.release_holds.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_insert_failure_releases_locks_and_propagates(
        self,
        use_case: CreateBookingUseCase,
        showtime: Showtime,
        mock_booking_command_repo: AsyncMock,
        mock_seat_hold_store: AsyncMock,
        mock_booking_canceller: AsyncMock,
    ):
        # Arrange
        mock_booking_command_repo.create.side_effect = OSError('disk full')

        # Act
        with pytest.raises(OSError):
            await use_case.create_booking(
                customer_id=CUSTOMER_ID, showtime_id=showtime.id, seat_ids=['A1'], total_price=1200
            )

        # Assert: no booking was written, so only the locks are dropped
        mock_booking_canceller.cancel.assert_not_awaited()
        mock_seat_hold_store.release_holds.assert_awaited_once()
        mock_seat_hold_store.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_showtime_raises_not_found(
        self, use_case: CreateBookingUseCase, mock_showtime_query_repo: AsyncMock
    ):
        mock_showtime_query_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.create_booking(
                customer_id=CUSTOMER_ID, showtime_id=uuid7(), seat_ids=['A1'], total_price=0
            )

    @pytest.mark.asyncio
    async def test_cancelled_showtime_is_not_bookable(
        self,
        use_case: CreateBookingUseCase,
        showtime: Showtime,
        mock_showtime_query_repo: AsyncMock,
        mock_seat_hold_store: AsyncMock,
    ):
        mock_showtime_query_repo.get_by_id.return_value = attrs.evolve(
            showtime, status=ShowtimeStatus.CANCELLED
        )

        with pytest.raises(InvalidStateError):
            await use_case.create_booking(
                customer_id=CUSTOMER_ID, showtime_id=showtime.id, seat_ids=['A1'], total_price=0
            )
        mock_seat_hold_store.acquire.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_adopts_holds_locked_beforehand(
        self,
        use_case: CreateBookingUseCase,
        showtime: Showtime,
        mock_seat_hold_store: AsyncMock,
        clock: FakeClock,
    ):
        """
        Given: the customer locked A1 and A2 through the seat-hold endpoint
        When: creating the booking with those hold ids
        Then: no new locks are taken and the existing holds are committed
        """
        # Arrange
        holds = _holds(showtime.id, ['A1', 'A2'], clock)
        mock_seat_hold_store.get_holds = AsyncMock(return_value=holds)

        # Act
        await use_case.create_booking(
            customer_id=CUSTOMER_ID,
            showtime_id=showtime.id,
            seat_ids=['A1', 'A2'],
            total_price=2400,
            hold_ids=[h.id for h in holds],
        )

        # Assert
        mock_seat_hold_store.acquire.assert_not_awaited()
        assert mock_seat_hold_store.commit.await_args.kwargs['hold_ids'] == [h.id for h in holds]

    @pytest.mark.asyncio
    async def test_adopting_expired_holds_raises_unavailable(
        self,
        use_case: CreateBookingUseCase,
        showtime: Showtime,
        mock_seat_hold_store: AsyncMock,
        clock: FakeClock,
    ):
        holds = _holds(showtime.id, ['A1'], clock)
        mock_seat_hold_store.get_holds = AsyncMock(return_value=holds)
        clock.advance(minutes=20)

        with pytest.raises(SeatUnavailableError):
            await use_case.create_booking(
                customer_id=CUSTOMER_ID,
                showtime_id=showtime.id,
                seat_ids=['A1'],
                total_price=1200,
                hold_ids=[holds[0].id],
            )
        mock_seat_hold_store.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_adopting_with_duplicate_seats_is_rejected(
        self,
        use_case: CreateBookingUseCase,
        showtime: Showtime,
        mock_seat_hold_store: AsyncMock,
        clock: FakeClock,
    ):
        # Arrange
        holds = _holds(showtime.id, ['A1', 'A1'], clock)
        mock_seat_hold_store.get_holds = AsyncMock(return_value=holds)

        # Act
        with pytest.raises(DomainError):
            await use_case.create_booking(
                customer_id=CUSTOMER_ID,
                showtime_id=showtime.id,
                seat_ids=['A1', 'A1'],
                total_price=2400,
                hold_ids=[h.id for h in holds],
            )

        # Assert
        mock_seat_hold_store.get_holds.assert_not_awaited()
        mock_seat_hold_store.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_adopting_a_hold_of_another_showtime_raises_unavailable(
        self,
        use_case: CreateBookingUseCase,
        showtime: Showtime,
        mock_seat_hold_store: AsyncMock,
        clock: FakeClock,
    ):
        """
        Given: A1 is held on this showtime and A2 on a different one
        When: creating a booking for A1 and A2 with both hold ids
        Then: SeatUnavailableError names A2 and nothing is committed
        """
        # Arrange
        holds = _holds(showtime.id, ['A1'], clock) + _holds(uuid7(), ['A2'], clock)
        mock_seat_hold_store.get_holds = AsyncMock(return_value=holds)

        # Act
        with pytest.raises(SeatUnavailableError) as exc_info:
            await use_case.create_booking(
                customer_id=CUSTOMER_ID,
                showtime_id=showtime.id,
                seat_ids=['A1', 'A2'],
                total_price=2400,
                hold_ids=[h.id for h in holds],
            )

        # Assert
        assert exc_info.value.seat_ids == ['A2']
        mock_seat_hold_store.commit.assert_not_awaited()
