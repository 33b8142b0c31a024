"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.service.booking.app.command.auto_cancel_expired_bookings_use_case import (
    AutoCancelExpiredBookingsUseCase,
)
from src.service.booking.app.service.booking_canceller import BookingCanceller
from src.service.booking.driven_adapter.repo.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from src.service.booking.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl
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
from src.service.shared_kernel.driven_adapter.system_clock import SystemClock
from src.service.showtime.app.command.complete_showtime_use_case import CompleteShowtimeUseCase
from src.service.showtime.app.service.showtime_cascade import ShowtimeCascade
from src.service.showtime.driven_adapter.repo.showtime_command_repo_impl import (
    ShowtimeCommandRepoImpl,
)
from src.service.showtime.driven_adapter.repo.showtime_query_repo_impl import (
    ShowtimeQueryRepoImpl,
)
from src.service.showtime.driven_adapter.repo.title_catalog_query_repo_impl import (
    TitleCatalogQueryRepoImpl,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (event-loop-aware engine, one short session per repo call)
    database = providers.Singleton(Database)

    # Tests override this with a fake clock
    clock = providers.Singleton(SystemClock)

    # Repositories (stateless - use session_factory per call)
    seat_hold_command_repo = providers.Singleton(
        SeatHoldCommandRepoImpl, session_factory=database.provided.session
    )
    seat_hold_query_repo = providers.Singleton(
        SeatHoldQueryRepoImpl, session_factory=database.provided.session
    )
    booking_command_repo = providers.Singleton(
        BookingCommandRepoImpl, session_factory=database.provided.session
    )
    booking_query_repo = providers.Singleton(
        BookingQueryRepoImpl, session_factory=database.provided.session
    )
    showtime_command_repo = providers.Singleton(
        ShowtimeCommandRepoImpl, session_factory=database.provided.session
    )
    showtime_query_repo = providers.Singleton(
        ShowtimeQueryRepoImpl, session_factory=database.provided.session
    )
    title_catalog_query_repo = providers.Singleton(
        TitleCatalogQueryRepoImpl, session_factory=database.provided.session
    )
    reconciliation_query_repo = providers.Singleton(
        ReconciliationQueryRepoImpl, session_factory=database.provided.session
    )

    # Domain services shared by several use cases
    seat_hold_store = providers.Singleton(
        SeatHoldStore, seat_hold_command_repo=seat_hold_command_repo, clock=clock
    )
    booking_canceller = providers.Singleton(
        BookingCanceller,
        booking_command_repo=booking_command_repo,
        seat_hold_store=seat_hold_store,
        clock=clock,
    )
    showtime_cascade = providers.Singleton(
        ShowtimeCascade,
        booking_command_repo=booking_command_repo,
        seat_hold_store=seat_hold_store,
        clock=clock,
    )

    # Use cases driven by the scheduler rather than HTTP
    complete_showtime_use_case = providers.Singleton(
        CompleteShowtimeUseCase,
        showtime_command_repo=showtime_command_repo,
        showtime_cascade=showtime_cascade,
        clock=clock,
    )
    auto_cancel_expired_bookings_use_case = providers.Singleton(
        AutoCancelExpiredBookingsUseCase,
        booking_command_repo=booking_command_repo,
        booking_canceller=booking_canceller,
        clock=clock,
    )

    # Reconciliation
    sweep_showtimes_use_case = providers.Singleton(
        SweepShowtimesUseCase,
        showtime_command_repo=showtime_command_repo,
        complete_showtime_use_case=complete_showtime_use_case,
        clock=clock,
    )
    sweep_expired_bookings_use_case = providers.Singleton(
        SweepExpiredBookingsUseCase,
        auto_cancel_expired_bookings_use_case=auto_cancel_expired_bookings_use_case,
    )
    sweep_expired_locks_use_case = providers.Singleton(
        SweepExpiredLocksUseCase, seat_hold_store=seat_hold_store
    )
    sweep_consistency_use_case = providers.Singleton(
        SweepConsistencyUseCase,
        reconciliation_query_repo=reconciliation_query_repo,
        seat_hold_store=seat_hold_store,
        showtime_cascade=showtime_cascade,
    )
    reconciliation_scheduler = providers.Singleton(
        ReconciliationScheduler,
        sweep_showtimes_use_case=sweep_showtimes_use_case,
        sweep_expired_bookings_use_case=sweep_expired_bookings_use_case,
        sweep_expired_locks_use_case=sweep_expired_locks_use_case,
        sweep_consistency_use_case=sweep_consistency_use_case,
    )


container = Container()


def setup() -> None:
    container.config_service()
    container.database()


def cleanup() -> None:
    container.reset_singletons()
