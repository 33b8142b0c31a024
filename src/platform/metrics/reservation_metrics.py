from prometheus_client import Counter, Histogram


class ReservationMetrics:
    """
    Seat reservation core metrics

    Tracks contention on seat holds, booking lifecycle transitions and the
    work done (or failed) by each reconciliation job.
    """

    def __init__(self) -> None:
        # ========== Seat Hold Metrics ==========
        self.seat_hold_requests = Counter(
            'seat_hold_requests_total',
            'Seat hold acquisition requests',
            ['result'],  # acquired/unavailable
        )

        self.seat_hold_seats = Counter(
            'seat_hold_seats_total',
            'Seats processed by hold acquisition',
            ['result'],
        )

        # ========== Booking Metrics ==========
        self.booking_transitions = Counter(
            'booking_transitions_total',
            'Booking state transitions',
            ['transition'],  # created/completed/cancelled/expired/compensated
        )

        # ========== Reconciliation Metrics ==========
        self.sweep_rows = Counter(
            'reconciliation_rows_affected_total',
            'Rows changed by reconciliation jobs',
            ['job', 'kind'],
        )

        self.sweep_failures = Counter(
            'reconciliation_failures_total',
            'Reconciliation attempts that raised an infrastructure error',
            ['job'],
        )

        self.sweep_duration = Histogram(
            'reconciliation_duration_seconds',
            'Reconciliation job duration',
            ['job'],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
        )

    # ========== Helper Methods ==========

    def record_seat_hold(self, *, result: str, seat_count: int) -> None:
        self.seat_hold_requests.labels(result=result).inc()
        self.seat_hold_seats.labels(result=result).inc(seat_count)

    def record_booking_transition(self, *, transition: str, count: int = 1) -> None:
        if count:
            self.booking_transitions.labels(transition=transition).inc(count)

    def record_sweep(self, *, job: str, counts: dict[str, int], duration: float) -> None:
        for kind, count in counts.items():
            if count:
                self.sweep_rows.labels(job=job, kind=kind).inc(count)
        self.sweep_duration.labels(job=job).observe(duration)

    def record_sweep_failure(self, *, job: str) -> None:
        self.sweep_failures.labels(job=job).inc()


# Global metrics instance
metrics = ReservationMetrics()
