from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import ForbiddenError
from src.service.booking.app.command.cancel_booking_use_case import (
    CUSTOMER_CANCELLED_REASON,
    CancelBookingUseCase,
)
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    InvalidStateError,
)
from test.constants import ANOTHER_CUSTOMER_ID, CUSTOMER_ID, T0
from test.service.booking.unit.booking_test_data import build_booking


@pytest.mark.unit
class TestCancelBookingUseCase:
    @pytest.fixture
    def mock_repo(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def mock_canceller(self) -> AsyncMock:
        canceller = AsyncMock()
        canceller.cancel = AsyncMock(return_value=True)
        return canceller

    @pytest.fixture
    def mock_seat_hold_store(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def use_case(
        self, mock_repo: AsyncMock, mock_canceller: AsyncMock, mock_seat_hold_store: AsyncMock
    ) -> CancelBookingUseCase:
        return CancelBookingUseCase(
            booking_command_repo=mock_repo,
            booking_canceller=mock_canceller,
            seat_hold_store=mock_seat_hold_store,
        )

    @pytest.mark.asyncio
    async def test_owner_cancels_unpaid_booking(
        self, use_case: CancelBookingUseCase, mock_repo: AsyncMock, mock_canceller: AsyncMock
    ):
        # Arrange
        booking = build_booking()
        cancelled = booking.cancel(reason=CUSTOMER_CANCELLED_REASON, now=T0)
        mock_repo.get_by_id = AsyncMock(side_effect=[booking, cancelled])

        # Act
        result = await use_case.cancel_booking(booking_id=booking.id, customer_id=CUSTOMER_ID)

        # Assert
        mock_canceller.cancel.assert_awaited_once_with(
            booking_id=booking.id, reason=CUSTOMER_CANCELLED_REASON
        )
        assert result is cancelled

    @pytest.mark.asyncio
    async def test_other_customer_is_forbidden(
        self, use_case: CancelBookingUseCase, mock_repo: AsyncMock, mock_canceller: AsyncMock
    ):
        mock_repo.get_by_id = AsyncMock(return_value=build_booking())

        with pytest.raises(ForbiddenError):
            await use_case.cancel_booking(
                booking_id=build_booking().id, customer_id=ANOTHER_CUSTOMER_ID
            )
        mock_canceller.cancel.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_paid_booking_cannot_be_cancelled(
        self, use_case: CancelBookingUseCase, mock_repo: AsyncMock, mock_canceller: AsyncMock
    ):
        paid = build_booking().mark_as_completed(payment_ref='pay-1', now=T0)
        mock_repo.get_by_id = AsyncMock(return_value=paid)

        with pytest.raises(InvalidStateError):
            await use_case.cancel_booking(booking_id=paid.id, customer_id=CUSTOMER_ID)
        mock_canceller.cancel.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_recancel_finishes_hold_release(
        self,
        use_case: CancelBookingUseCase,
        mock_repo: AsyncMock,
        mock_seat_hold_store: AsyncMock,
    ):
        """
        Given: a booking cancelled earlier whose holds may not have been released
        When: cancelling it again
        Then: holds are released before the already-cancelled conflict is reported
        """
        # Arrange
        cancelled = build_booking().cancel(reason='expired', now=T0)
        mock_repo.get_by_id = AsyncMock(return_value=cancelled)

        # Act
        with pytest.raises(InvalidStateError):
            await use_case.cancel_booking(booking_id=cancelled.id, customer_id=CUSTOMER_ID)

        # Assert
        mock_seat_hold_store.release.assert_awaited_once_with(booking_id=cancelled.id)
