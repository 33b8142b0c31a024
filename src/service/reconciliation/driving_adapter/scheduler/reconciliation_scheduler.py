"""
Reconciliation Scheduler

Runs each sweep in its own loop inside the application's task group.
Jobs are idempotent, so several replicas may run the scheduler at once.
"""

import time
from typing import Awaitable, Callable

import anyio
import attrs
from sqlalchemy.exc import SQLAlchemyError

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
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
from src.service.reconciliation.app.dto.sweep_result import SweepResult


RETRYABLE_ERRORS = (SQLAlchemyError, OSError)


@attrs.define
class ReconciliationJob:
    name: str
    interval_seconds: float
    run: Callable[[], Awaitable[SweepResult]]


class ReconciliationScheduler:
    def __init__(
        self,
        *,
        sweep_showtimes_use_case: SweepShowtimesUseCase,
        sweep_expired_bookings_use_case: SweepExpiredBookingsUseCase,
        sweep_expired_locks_use_case: SweepExpiredLocksUseCase,
        sweep_consistency_use_case: SweepConsistencyUseCase,
        max_retries: int | None = None,
        retry_backoff_seconds: float | None = None,
    ) -> None:
        self.jobs = [
            ReconciliationJob(
                name=SweepShowtimesUseCase.JOB,
                interval_seconds=settings.RECONCILIATION_SHOWTIME_INTERVAL_SECONDS,
                run=sweep_showtimes_use_case.execute,
            ),
            ReconciliationJob(
                name=SweepExpiredBookingsUseCase.JOB,
                interval_seconds=settings.RECONCILIATION_BOOKING_INTERVAL_SECONDS,
                run=sweep_expired_bookings_use_case.execute,
            ),
            ReconciliationJob(
                name=SweepExpiredLocksUseCase.JOB,
                interval_seconds=settings.RECONCILIATION_LOCK_INTERVAL_SECONDS,
                run=sweep_expired_locks_use_case.execute,
            ),
            ReconciliationJob(
                name=SweepConsistencyUseCase.JOB,
                interval_seconds=settings.RECONCILIATION_CONSISTENCY_INTERVAL_SECONDS,
                run=sweep_consistency_use_case.execute,
            ),
        ]
        self.max_retries = (
            settings.RECONCILIATION_MAX_RETRIES if max_retries is None else max_retries
        )
        self.retry_backoff_seconds = (
            settings.RECONCILIATION_RETRY_BACKOFF_SECONDS
            if retry_backoff_seconds is None
            else retry_backoff_seconds
        )

    async def run_once(self) -> list[SweepResult]:
        """Run every job once, in a fixed order. Jobs that keep failing are skipped."""
        results = []
        for job in self.jobs:
            result = await self.run_job(job)
            if result is not None:
                results.append(result)
        return results

    async def run_job(self, job: ReconciliationJob) -> SweepResult | None:
        """
        Retry infrastructure errors with linear backoff; return None once the
        attempts are used up so the loop waits for its next tick.

        A domain error means the sweep lost a race with a user action; the job
        is skipped for this tick without retrying. Anything else propagates.
        """
        for attempt in range(1, self.max_retries + 1):
            started = time.perf_counter()
            try:
                result = await job.run()
            except RETRYABLE_ERRORS as e:
                metrics.record_sweep_failure(job=job.name)
                if attempt < self.max_retries:
                    Logger.base.warning(
                        f'⏳ [RECONCILIATION] {job.name} attempt {attempt}/{self.max_retries} '
                        f'failed, retry in {self.retry_backoff_seconds * attempt}s | {e}'
                    )
                    await anyio.sleep(self.retry_backoff_seconds * attempt)
                else:
                    Logger.base.error(
                        f'❌ [RECONCILIATION] {job.name} gave up after {attempt} attempts | {e}'
                    )
            except CustomBaseError as e:
                metrics.record_sweep_failure(job=job.name)
                Logger.base.warning(
                    f'⚠️  [RECONCILIATION] {job.name} skipped: {type(e).__name__}: {e.message}'
                )
                return None
            else:
                metrics.record_sweep(
                    job=job.name, counts=result.counts, duration=time.perf_counter() - started
                )
                if result.total:
                    Logger.base.info(f'🧭 [RECONCILIATION] {job.name}: {result.counts}')
                return result
        return None

    async def serve(self) -> None:
        """Block forever, one loop per job; cancel the enclosing scope to stop."""
        Logger.base.info(
            '🧭 [RECONCILIATION] Scheduler started: '
            + ', '.join(f'{job.name}={job.interval_seconds}s' for job in self.jobs)
        )
        async with anyio.create_task_group() as tg:
            for job in self.jobs:
                tg.start_soon(self._loop, job)

    async def _loop(self, job: ReconciliationJob) -> None:
        while True:
            try:
                await self.run_job(job)
            except Exception:
                # One broken job must not take the other loops or the app down with it
                metrics.record_sweep_failure(job=job.name)
                Logger.base.exception(f'❌ [RECONCILIATION] {job.name} crashed, next tick')
            await anyio.sleep(job.interval_seconds)
