"""
Integration fixtures: real repositories on the test database, driven by the fake clock.

Wired by hand in the same shape as src.platform.config.di.Container.
"""

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

import pytest

from src.platform.database.orm_db_setting import Database
from src.service.booking.app.command.auto_cancel_expired_bookings_use_case import (
    AutoCancelExpiredBookingsUseCase,
)
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.command.confirm_payment_use_case import ConfirmPaymentUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.service.booking_canceller import BookingCanceller
from src.service.booking.driven_adapter.repo.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from src.service.reconciliation.app.command.sweep_consistency_use_case import (
    SweepConsistencyUseCase,
)
from src.service.reconciliation.app.command.sweep_expired_bookings_use_case import (
    SweepExpiredBookingsUseCase,
)
from src.service.reconciliation.app.command.sweep_expired_locks_use_case import (
    SweepExpiredLocksUseCase,
)
from src.service.reconciliation.app.command.sweep_showtimes_use_case import (
    SweepShowtimesUseCase,
)
from src.service.reconciliation.driven_adapter.repo.reconciliation_query_repo_impl import (
    ReconciliationQueryRepoImpl,
)
from src.service.reconciliation.driving_adapter.scheduler.reconciliation_scheduler import (
    ReconciliationScheduler,
)
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore
from src.service.seat_hold.driven_adapter.repo.seat_hold_command_repo_impl import (
    SeatHoldCommandRepoImpl,
)
from src.service.seat_hold.driven_adapter.repo.seat_hold_query_repo_impl import (
    SeatHoldQueryRepoImpl,
)
from src.service.showtime.app.command.cancel_showtime_use_case import CancelShowtimeUseCase
from src.service.showtime.app.command.complete_showtime_use_case import CompleteShowtimeUseCase
from src.service.showtime.app.command.create_showtime_use_case import CreateShowtimeUseCase
from src.service.showtime.app.service.showtime_cascade import ShowtimeCascade
from src.service.showtime.domain.entity.showtime_entity import Showtime
from src.service.showtime.driven_adapter.repo.showtime_command_repo_impl import (
    ShowtimeCommandRepoImpl,
)
from src.service.showtime.driven_adapter.repo.showtime_query_repo_impl import (
    ShowtimeQueryRepoImpl,
)
from src.service.showtime.driven_adapter.repo.title_catalog_query_repo_impl import (
    TitleCatalogQueryRepoImpl,
)
from test.constants import ROOM_ID, TITLE_ID
from test.fake_clock import FakeClock


# =============================================================================
# Repositories
# =============================================================================
@pytest.fixture
def seat_hold_command_repo(database: Database) -> SeatHoldCommandRepoImpl:
    return SeatHoldCommandRepoImpl(session_factory=database.session)


@pytest.fixture
def seat_hold_query_repo(database: Database) -> SeatHoldQueryRepoImpl:
    return SeatHoldQueryRepoImpl(session_factory=database.session)


@pytest.fixture
def booking_command_repo(database: Database) -> BookingCommandRepoImpl:
    return BookingCommandRepoImpl(session_factory=database.session)


@pytest.fixture
def showtime_command_repo(database: Database) -> ShowtimeCommandRepoImpl:
    return ShowtimeCommandRepoImpl(session_factory=database.session)


@pytest.fixture
def showtime_query_repo(database: Database) -> ShowtimeQueryRepoImpl:
    return ShowtimeQueryRepoImpl(session_factory=database.session)


@pytest.fixture
def title_catalog_query_repo(database: Database) -> TitleCatalogQueryRepoImpl:
    return TitleCatalogQueryRepoImpl(session_factory=database.session)


@pytest.fixture
def reconciliation_query_repo(database: Database) -> ReconciliationQueryRepoImpl:
    return ReconciliationQueryRepoImpl(session_factory=database.session)


# =============================================================================
# Services
# =============================================================================
@pytest.fixture
def seat_hold_store(
    seat_hold_command_repo: SeatHoldCommandRepoImpl, fake_clock: FakeClock
) -> SeatHoldStore:
    return SeatHoldStore(seat_hold_command_repo=seat_hold_command_repo, clock=fake_clock)


@pytest.fixture
def booking_canceller(
    booking_command_repo: BookingCommandRepoImpl,
    seat_hold_store: SeatHoldStore,
    fake_clock: FakeClock,
) -> BookingCanceller:
    return BookingCanceller(
        booking_command_repo=booking_command_repo, seat_hold_store=seat_hold_store, clock=fake_clock
    )


@pytest.fixture
def showtime_cascade(
    booking_command_repo: BookingCommandRepoImpl,
    seat_hold_store: SeatHoldStore,
    fake_clock: FakeClock,
) -> ShowtimeCascade:
    return ShowtimeCascade(
        booking_command_repo=booking_command_repo, seat_hold_store=seat_hold_store, clock=fake_clock
    )


# =============================================================================
# Use Cases
# =============================================================================
@pytest.fixture
def create_showtime_use_case(
    showtime_command_repo: ShowtimeCommandRepoImpl,
    title_catalog_query_repo: TitleCatalogQueryRepoImpl,
    fake_clock: FakeClock,
) -> CreateShowtimeUseCase:
    return CreateShowtimeUseCase(
        showtime_command_repo=showtime_command_repo,
        title_catalog_query_repo=title_catalog_query_repo,
        clock=fake_clock,
    )


@pytest.fixture
def cancel_showtime_use_case(
    showtime_command_repo: ShowtimeCommandRepoImpl,
    showtime_cascade: ShowtimeCascade,
    fake_clock: FakeClock,
) -> CancelShowtimeUseCase:
    return CancelShowtimeUseCase(
        showtime_command_repo=showtime_command_repo,
        showtime_cascade=showtime_cascade,
        clock=fake_clock,
    )


@pytest.fixture
def complete_showtime_use_case(
    showtime_command_repo: ShowtimeCommandRepoImpl,
    showtime_cascade: ShowtimeCascade,
    fake_clock: FakeClock,
) -> CompleteShowtimeUseCase:
    return CompleteShowtimeUseCase(
        showtime_command_repo=showtime_command_repo,
        showtime_cascade=showtime_cascade,
        clock=fake_clock,
    )


@pytest.fixture
def create_booking_use_case(
    booking_command_repo: BookingCommandRepoImpl,
    showtime_query_repo: ShowtimeQueryRepoImpl,
    seat_hold_store: SeatHoldStore,
    booking_canceller: BookingCanceller,
    fake_clock: FakeClock,
) -> CreateBookingUseCase:
    return CreateBookingUseCase(
        booking_command_repo=booking_command_repo,
        showtime_query_repo=showtime_query_repo,
        seat_hold_store=seat_hold_store,
        booking_canceller=booking_canceller,
        clock=fake_clock,
    )


@pytest.fixture
def confirm_payment_use_case(
    booking_command_repo: BookingCommandRepoImpl, fake_clock: FakeClock
) -> ConfirmPaymentUseCase:
    return ConfirmPaymentUseCase(booking_command_repo=booking_command_repo, clock=fake_clock)


@pytest.fixture
def cancel_booking_use_case(
    booking_command_repo: BookingCommandRepoImpl,
    booking_canceller: BookingCanceller,
    seat_hold_store: SeatHoldStore,
) -> CancelBookingUseCase:
    return CancelBookingUseCase(
        booking_command_repo=booking_command_repo,
        booking_canceller=booking_canceller,
        seat_hold_store=seat_hold_store,
    )


@pytest.fixture
def auto_cancel_expired_bookings_use_case(
    booking_command_repo: BookingCommandRepoImpl,
    booking_canceller: BookingCanceller,
    fake_clock: FakeClock,
) -> AutoCancelExpiredBookingsUseCase:
    return AutoCancelExpiredBookingsUseCase(
        booking_command_repo=booking_command_repo,
        booking_canceller=booking_canceller,
        clock=fake_clock,
    )


@pytest.fixture
def reconciliation_scheduler(
    showtime_command_repo: ShowtimeCommandRepoImpl,
    complete_showtime_use_case: CompleteShowtimeUseCase,
    auto_cancel_expired_bookings_use_case: AutoCancelExpiredBookingsUseCase,
    seat_hold_store: SeatHoldStore,
    reconciliation_query_repo: ReconciliationQueryRepoImpl,
    showtime_cascade: ShowtimeCascade,
    fake_clock: FakeClock,
) -> ReconciliationScheduler:
    return ReconciliationScheduler(
        sweep_showtimes_use_case=SweepShowtimesUseCase(
            showtime_command_repo=showtime_command_repo,
            complete_showtime_use_case=complete_showtime_use_case,
            clock=fake_clock,
        ),
        sweep_expired_bookings_use_case=SweepExpiredBookingsUseCase(
            auto_cancel_expired_bookings_use_case=auto_cancel_expired_bookings_use_case
        ),
        sweep_expired_locks_use_case=SweepExpiredLocksUseCase(seat_hold_store=seat_hold_store),
        sweep_consistency_use_case=SweepConsistencyUseCase(
            reconciliation_query_repo=reconciliation_query_repo,
            seat_hold_store=seat_hold_store,
            showtime_cascade=showtime_cascade,
        ),
        retry_backoff_seconds=0,
    )


# =============================================================================
# Data Builders
# =============================================================================
@pytest.fixture
def make_showtime(
    create_showtime_use_case: CreateShowtimeUseCase, fake_clock: FakeClock
) -> Callable[..., Awaitable[Showtime]]:
    """Schedule a showtime a day ahead of the fake clock unless told otherwise."""

    async def _make(
        *,
        room_id: int = ROOM_ID,
        title_id: int = TITLE_ID,
        starts_at: datetime | None = None,
    ) -> Showtime:
        return await create_showtime_use_case.create(
            room_id=room_id,
            title_id=title_id,
            starts_at=starts_at or fake_clock.now() + timedelta(days=1),
        )

    return _make
