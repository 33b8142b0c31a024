"""
Integration tests for SeatHoldStore on a real database

Covers the race-sensitive properties:
- N concurrent acquires of one seat: exactly one wins
- acquire is all-or-nothing when one seat is already held
- an expired lock frees its seat without any sweep
- commit after lease expiry fails and leaves the seat unbooked
- loose extends never touch holds a booking owns
"""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import update
from uuid_utils import uuid7

from src.platform.database.orm_db_setting import Database
from src.service.seat_hold.app.service.seat_hold_store import SeatHoldStore
from src.service.seat_hold.driven_adapter.model.seat_hold_model import SeatHoldModel
from src.service.seat_hold.driven_adapter.repo.seat_hold_query_repo_impl import (
    SeatHoldQueryRepoImpl,
)
from src.service.shared_kernel.domain.enum.seat_hold_status import SeatHoldStatus
from src.service.shared_kernel.domain.exception.reservation_exceptions import (
    LockExpiredError,
    NotLockedError,
    SeatUnavailableError,
)
from test.fake_clock import FakeClock


LEASE = timedelta(minutes=15)


class TestConcurrentAcquire:
    @pytest.mark.asyncio
    async def test_parallel_acquires_of_one_seat_have_exactly_one_winner(
        self, seat_hold_store: SeatHoldStore, seat_hold_query_repo: SeatHoldQueryRepoImpl
    ):
        """
        Given: a free seat
        When: eight customers acquire it at the same time
        Then: one gets the hold, seven get SeatUnavailableError, one row exists
        """
        # Arrange
        showtime_id = uuid7()

        async def attempt():
            return await seat_hold_store.acquire(
                showtime_id=showtime_id, seat_ids=['E7'], lease=LEASE
            )

        # Act
        results = await asyncio.gather(*[attempt() for _ in range(8)], return_exceptions=True)

        # Assert
        winners = [r for r in results if isinstance(r, list)]
        losers = [r for r in results if isinstance(r, SeatUnavailableError)]
        assert len(winners) == 1
        assert len(losers) == 7
        rows = await seat_hold_query_repo.list_by_showtime(showtime_id=showtime_id)
        assert len(rows) == 1
        assert rows[0].id == winners[0][0].id


class TestAllOrNothingAcquire:
    @pytest.mark.asyncio
    async def test_taken_seat_leaves_no_partial_holds(
        self, seat_hold_store: SeatHoldStore, seat_hold_query_repo: SeatHoldQueryRepoImpl
    ):
        """
        Given: B2 is already held
        When: another customer acquires B1, B2, B3
        Then: SeatUnavailableError names B2 and only the original hold on B2 remains
        """
        # Arrange
        showtime_id = uuid7()
        [existing] = await seat_hold_store.acquire(
            showtime_id=showtime_id, seat_ids=['B2'], lease=LEASE
        )

        # Act
        with pytest.raises(SeatUnavailableError) as exc_info:
            await seat_hold_store.acquire(
                showtime_id=showtime_id, seat_ids=['B1', 'B2', 'B3'], lease=LEASE
            )

        # Assert
        assert exc_info.value.seat_ids == ['B2']
        rows = await seat_hold_query_repo.list_by_showtime(showtime_id=showtime_id)
        assert [(r.id, r.seat_id) for r in rows] == [(existing.id, 'B2')]


class TestLeaseExpiry:
    @pytest.mark.asyncio
    async def test_expired_lock_is_free_without_a_sweep(
        self, seat_hold_store: SeatHoldStore, fake_clock: FakeClock
    ):
        """
        Given: customer 1 locked C4 and walked away
        When: the lease passes and customer 2 acquires C4
        Then: customer 2 gets a fresh hold
        """
        # Arrange
        showtime_id = uuid7()
        [first] = await seat_hold_store.acquire(
            showtime_id=showtime_id, seat_ids=['C4'], lease=LEASE
        )
        fake_clock.advance(minutes=15, seconds=1)

        # Act
        [second] = await seat_hold_store.acquire(
            showtime_id=showtime_id, seat_ids=['C4'], lease=LEASE
        )

        # Assert
        assert second.id != first.id
        assert second.lock_expires_at == fake_clock.now() + LEASE

    @pytest.mark.asyncio
    async def test_lock_is_still_held_right_at_expiry(
        self, seat_hold_store: SeatHoldStore, fake_clock: FakeClock
    ):
        showtime_id = uuid7()
        await seat_hold_store.acquire(showtime_id=showtime_id, seat_ids=['C5'], lease=LEASE)
        fake_clock.advance(minutes=15)

        with pytest.raises(SeatUnavailableError):
            await seat_hold_store.acquire(showtime_id=showtime_id, seat_ids=['C5'], lease=LEASE)

    @pytest.mark.asyncio
    async def test_commit_after_expiry_raises_lock_expired(
        self,
        seat_hold_store: SeatHoldStore,
        seat_hold_query_repo: SeatHoldQueryRepoImpl,
        fake_clock: FakeClock,
    ):
        """
        Given: a lock past its lease
        When: committing it to a booking
        Then: LockExpiredError, and the hold is not BOOKED
        """
        # Arrange
        showtime_id = uuid7()
        [hold] = await seat_hold_store.acquire(
            showtime_id=showtime_id, seat_ids=['D1'], lease=LEASE
        )
        fake_clock.advance(minutes=16)

        # Act
        with pytest.raises(LockExpiredError):
            await seat_hold_store.commit(hold_ids=[hold.id], booking_id=uuid7())

        # Assert
        rows = await seat_hold_query_repo.list_by_showtime(showtime_id=showtime_id)
        assert all(r.status == SeatHoldStatus.LOCKED for r in rows)

    @pytest.mark.asyncio
    async def test_purge_removes_only_expired_locks(
        self,
        seat_hold_store: SeatHoldStore,
        seat_hold_query_repo: SeatHoldQueryRepoImpl,
        fake_clock: FakeClock,
    ):
        # Arrange
        showtime_id = uuid7()
        await seat_hold_store.acquire(showtime_id=showtime_id, seat_ids=['F1'], lease=LEASE)
        fake_clock.advance(minutes=10)
        await seat_hold_store.acquire(showtime_id=showtime_id, seat_ids=['F2'], lease=LEASE)
        fake_clock.advance(minutes=6)

        # Act
        purged = await seat_hold_store.purge_expired_locks()

        # Assert
        assert purged == 1
        rows = await seat_hold_query_repo.list_by_showtime(showtime_id=showtime_id)
        assert [r.seat_id for r in rows] == ['F2']


class TestExtend:
    @pytest.mark.asyncio
    async def test_loose_extend_skips_holds_owned_by_a_booking(
        self,
        seat_hold_store: SeatHoldStore,
        seat_hold_query_repo: SeatHoldQueryRepoImpl,
        database: Database,
    ):
        """
        Given: a LOCKED hold that points at a booking
        When: extending it as a loose hold
        Then: NotLockedError names it and its expiry is unchanged
        """
        # Arrange
        showtime_id, booking_id = uuid7(), uuid7()
        [hold] = await seat_hold_store.acquire(
            showtime_id=showtime_id, seat_ids=['G1'], lease=LEASE
        )
        async with database.session() as session, session.begin():
            await session.execute(
                update(SeatHoldModel)
                .where(SeatHoldModel.id == hold.id)
                .values(booking_id=booking_id)
            )

        # Act
        with pytest.raises(NotLockedError) as exc_info:
            await seat_hold_store.extend(hold_ids=[hold.id], additional=LEASE * 2)

        # Assert
        assert exc_info.value.hold_ids == [hold.id]
        [row] = await seat_hold_query_repo.list_by_showtime(showtime_id=showtime_id)
        assert row.lock_expires_at == hold.lock_expires_at

    @pytest.mark.asyncio
    async def test_owning_booking_can_extend_its_locked_hold(
        self,
        seat_hold_store: SeatHoldStore,
        database: Database,
        fake_clock: FakeClock,
    ):
        # Arrange
        showtime_id, booking_id = uuid7(), uuid7()
        [hold] = await seat_hold_store.acquire(
            showtime_id=showtime_id, seat_ids=['G2'], lease=LEASE
        )
        async with database.session() as session, session.begin():
            await session.execute(
                update(SeatHoldModel)
                .where(SeatHoldModel.id == hold.id)
                .values(booking_id=booking_id)
            )

        # Act
        [extended] = await seat_hold_store.extend(
            hold_ids=[hold.id], additional=LEASE * 2, booking_id=booking_id
        )

        # Assert
        assert extended.lock_expires_at == fake_clock.now() + LEASE * 2
