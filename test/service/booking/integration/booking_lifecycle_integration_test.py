"""
Integration tests for the booking lifecycle on a real database

- create_booking commits the holds and sets the payment deadline
- two customers racing for one seat: one booking, one SeatUnavailableError
- adopted holds must belong to the showtime, one per distinct seat
- auto-cancel respects the deadline to the second and frees the seats
- confirmed payment survives the lock sweep
"""

import asyncio
from datetime import timedelta

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.booking.app.command.auto_cancel_expired_bookings_use_case import (
    AutoCancelExpiredBookingsUseCase,
)
from src.service.booking.app.command.confirm_payment_use_case import ConfirmPaymentUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.service.booking_canceller import EXPIRED_REASON
from src.service.booking.driven_adapter.repo.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore
from src.service.seat_hold.driven_adapter.repo.seat_hold_query_repo_impl import (
    SeatHoldQueryRepoImpl,
)
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus, PaymentStatus
from src.service.shared_kernel.domain.enum.seat_hold_status import SeatHoldStatus
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    BookingExpiredError,
    SeatUnavailableError,
)
from test.constants import ANOTHER_CUSTOMER_ID, ANOTHER_ROOM_ID, CUSTOMER_ID
from test.fake_clock import FakeClock


LEASE = timedelta(minutes=15)


class TestCreateBooking:
    @pytest.mark.asyncio
    async def test_create_booking_commits_holds(
        self,
        make_showtime,
        create_booking_use_case: CreateBookingUseCase,
        seat_hold_query_repo: SeatHoldQueryRepoImpl,
    ):
        # Arrange
        showtime = await make_showtime()

        # Act
        booking = await create_booking_use_case.create_booking(
            customer_id=CUSTOMER_ID,
            showtime_id=showtime.id,
            seat_ids=['C3', 'C4'],
            total_price=2400,
        )

        # Assert
        holds = await seat_hold_query_repo.list_by_booking(booking_id=booking.id)
        assert sorted(h.seat_id for h in holds) == ['C3', 'C4']
        assert all(h.status == SeatHoldStatus.BOOKED for h in holds)
        assert all(h.lock_expires_at is None for h in holds)

    @pytest.mark.asyncio
    async def test_two_customers_race_for_one_seat(
        self,
        make_showtime,
        create_booking_use_case: CreateBookingUseCase,
        booking_command_repo: BookingCommandRepoImpl,
    ):
        """
        Given: one free seat
        When: two customers book it at the same time
        Then: exactly one booking exists and the other customer sees SeatUnavailableError
        """
        # Arrange
        showtime = await make_showtime()

        async def book(customer_id: int):
            return await create_booking_use_case.create_booking(
                customer_id=customer_id, showtime_id=showtime.id, seat_ids=['D1'], total_price=1200
            )

        # Act
        results = await asyncio.gather(
            book(CUSTOMER_ID), book(ANOTHER_CUSTOMER_ID), return_exceptions=True
        )

        # Assert
        bookings = [r for r in results if not isinstance(r, BaseException)]
        errors = [r for r in results if isinstance(r, SeatUnavailableError)]
        assert len(bookings) == 1
        assert len(errors) == 1
        stored = await booking_command_repo.get_by_id(booking_id=bookings[0].id)
        assert stored is not None
        assert stored.booking_status == BookingStatus.CONFIRMED


    @pytest.mark.asyncio
    async def test_holds_of_another_showtime_cannot_be_adopted(
        self,
        make_showtime,
        create_booking_use_case: CreateBookingUseCase,
        seat_hold_store: SeatHoldStore,
        seat_hold_query_repo: SeatHoldQueryRepoImpl,
    ):
        """
        Given: A1 is locked on showtime X and A2 on showtime Y
        When: booking A1 and A2 on X with both hold ids
        Then: SeatUnavailableError names A2 and neither hold is booked
        """
        # Arrange
        x = await make_showtime()
        y = await make_showtime(room_id=ANOTHER_ROOM_ID)
        [hold_x] = await seat_hold_store.acquire(showtime_id=x.id, seat_ids=['A1'], lease=LEASE)
        [hold_y] = await seat_hold_store.acquire(showtime_id=y.id, seat_ids=['A2'], lease=LEASE)

        # Act
        with pytest.raises(SeatUnavailableError) as exc_info:
            await create_booking_use_case.create_booking(
                customer_id=CUSTOMER_ID,
                showtime_id=x.id,
                seat_ids=['A1', 'A2'],
                total_price=2400,
                hold_ids=[hold_x.id, hold_y.id],
            )

        # Assert
        assert exc_info.value.seat_ids == ['A2']
        [y_row] = await seat_hold_query_repo.list_by_showtime(showtime_id=y.id)
        assert y_row.status == SeatHoldStatus.LOCKED
        assert y_row.booking_id is None

    @pytest.mark.asyncio
    async def test_duplicate_seats_cannot_pull_in_a_foreign_hold(
        self,
        make_showtime,
        create_booking_use_case: CreateBookingUseCase,
        seat_hold_store: SeatHoldStore,
        seat_hold_query_repo: SeatHoldQueryRepoImpl,
    ):
        """
        Given: A1 is locked on showtime X and A1 on showtime Y
        When: booking ['A1', 'A1'] on X with both hold ids
        Then: the request is rejected and Y's hold stays a loose lock
        """
        # Arrange
        x = await make_showtime()
        y = await make_showtime(room_id=ANOTHER_ROOM_ID)
        [hold_x] = await seat_hold_store.acquire(showtime_id=x.id, seat_ids=['A1'], lease=LEASE)
        [hold_y] = await seat_hold_store.acquire(showtime_id=y.id, seat_ids=['A1'], lease=LEASE)

        # Act
        with pytest.raises(DomainError):
            await create_booking_use_case.create_booking(
                customer_id=CUSTOMER_ID,
                showtime_id=x.id,
                seat_ids=['A1', 'A1'],
                total_price=2400,
                hold_ids=[hold_x.id, hold_y.id],
            )

        # Assert
        for showtime in (x, y):
            [row] = await seat_hold_query_repo.list_by_showtime(showtime_id=showtime.id)
            assert row.status == SeatHoldStatus.LOCKED
            assert row.booking_id is None


class TestAutoCancelExpiredBookings:
    @pytest.mark.asyncio
    async def test_deadline_boundary_to_the_second(
        self,
        make_showtime,
        create_booking_use_case: CreateBookingUseCase,
        auto_cancel_expired_bookings_use_case: AutoCancelExpiredBookingsUseCase,
        booking_command_repo: BookingCommandRepoImpl,
        fake_clock: FakeClock,
    ):
        """
        Given: two unpaid bookings, one due 1 second ago and one due in 1 second
        When: the expiry job runs
        Then: only the overdue one is cancelled with reason expired
        """
        # Arrange
        showtime = await make_showtime()
        overdue = await create_booking_use_case.create_booking(
            customer_id=CUSTOMER_ID, showtime_id=showtime.id, seat_ids=['A1'], total_price=1200
        )
        fake_clock.advance(seconds=2)
        upcoming = await create_booking_use_case.create_booking(
            customer_id=ANOTHER_CUSTOMER_ID,
            showtime_id=showtime.id,
            seat_ids=['A2'],
            total_price=1200,
        )
        fake_clock.set(overdue.hold_expires_at + timedelta(seconds=1))

        # Act
        cancelled = await auto_cancel_expired_bookings_use_case.execute()

        # Assert
        assert cancelled == 1
        overdue_now = await booking_command_repo.get_by_id(booking_id=overdue.id)
        upcoming_now = await booking_command_repo.get_by_id(booking_id=upcoming.id)
        assert overdue_now.booking_status == BookingStatus.CANCELLED
        assert overdue_now.payment_status == PaymentStatus.FAILED
        assert overdue_now.cancel_reason == EXPIRED_REASON
        assert upcoming_now.booking_status == BookingStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_expired_booking_frees_its_seats(
        self,
        make_showtime,
        create_booking_use_case: CreateBookingUseCase,
        auto_cancel_expired_bookings_use_case: AutoCancelExpiredBookingsUseCase,
        fake_clock: FakeClock,
    ):
        # Arrange
        showtime = await make_showtime()
        booking = await create_booking_use_case.create_booking(
            customer_id=CUSTOMER_ID, showtime_id=showtime.id, seat_ids=['F5'], total_price=1200
        )
        fake_clock.set(booking.hold_expires_at + timedelta(seconds=1))

        # Act
        await auto_cancel_expired_bookings_use_case.execute()

        # Assert
        rebooked = await create_booking_use_case.create_booking(
            customer_id=ANOTHER_CUSTOMER_ID,
            showtime_id=showtime.id,
            seat_ids=['F5'],
            total_price=1200,
        )
        assert rebooked.seat_ids == ['F5']

    @pytest.mark.asyncio
    async def test_second_run_is_a_no_op(
        self,
        make_showtime,
        create_booking_use_case: CreateBookingUseCase,
        auto_cancel_expired_bookings_use_case: AutoCancelExpiredBookingsUseCase,
        fake_clock: FakeClock,
    ):
        showtime = await make_showtime()
        booking = await create_booking_use_case.create_booking(
            customer_id=CUSTOMER_ID, showtime_id=showtime.id, seat_ids=['G1'], total_price=1200
        )
        fake_clock.set(booking.hold_expires_at + timedelta(minutes=1))

        assert await auto_cancel_expired_bookings_use_case.execute() == 1
        assert await auto_cancel_expired_bookings_use_case.execute() == 0


class TestConfirmPayment:
    @pytest.mark.asyncio
    async def test_paid_booking_survives_the_lock_sweep(
        self,
        make_showtime,
        create_booking_use_case: CreateBookingUseCase,
        confirm_payment_use_case: ConfirmPaymentUseCase,
        seat_hold_store: SeatHoldStore,
        seat_hold_query_repo: SeatHoldQueryRepoImpl,
        fake_clock: FakeClock,
    ):
        """
        Given: a booking paid inside its deadline
        When: the lease elapses and the lock sweep runs
        Then: the seats stay BOOKED for that booking
        """
        # Arrange
        showtime = await make_showtime()
        booking = await create_booking_use_case.create_booking(
            customer_id=CUSTOMER_ID, showtime_id=showtime.id, seat_ids=['H1'], total_price=1200
        )
        await confirm_payment_use_case.confirm_payment(booking_id=booking.id, payment_ref='pay-1')

        # Act
        fake_clock.advance(hours=1)
        purged = await seat_hold_store.purge_expired_locks()

        # Assert
        assert purged == 0
        holds = await seat_hold_query_repo.list_by_booking(booking_id=booking.id)
        assert [h.status for h in holds] == [SeatHoldStatus.BOOKED]

    @pytest.mark.asyncio
    async def test_payment_one_second_late_is_rejected(
        self,
        make_showtime,
        create_booking_use_case: CreateBookingUseCase,
        confirm_payment_use_case: ConfirmPaymentUseCase,
        fake_clock: FakeClock,
    ):
        showtime = await make_showtime()
        booking = await create_booking_use_case.create_booking(
            customer_id=CUSTOMER_ID, showtime_id=showtime.id, seat_ids=['H2'], total_price=1200
        )
        fake_clock.set(booking.hold_expires_at + timedelta(seconds=1))

        with pytest.raises(BookingExpiredError):
            await confirm_payment_use_case.confirm_payment(
                booking_id=booking.id, payment_ref='pay-1'
            )
