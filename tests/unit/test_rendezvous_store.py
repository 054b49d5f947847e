"""
Unit tests for RendezvousStore transitions.
"""
import asyncio
import gc

import pytest

from locator.application.services.rendezvous_store import RendezvousStore
from locator.domain.exceptions import InvalidArgumentError
from locator.domain.models.tracking_session import Coordinates, TrackingStatus
from locator.infrastructure.db.memory_repositories import InMemoryTrackingSessionRepository


class YieldingSessionRepository(InMemoryTrackingSessionRepository):
    """In-memory repository that gives up the event loop around I/O, like a network store"""

    def __init__(self):
        super().__init__()
        self.in_flight = 0
        self.max_in_flight = 0

    async def find_by_key(self, session_key):
        session = await super().find_by_key(session_key)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        return session

    async def save(self, session):
        await asyncio.sleep(0)
        self.in_flight -= 1
        return await super().save(session)


class TestRead:
    """Tests for read / read_latest"""

    @pytest.mark.asyncio
    async def test_unknown_key_reads_waiting(self, rendezvous_store):
        session = await rendezvous_store.read("dev-1")
        assert session.status == TrackingStatus.WAITING
        assert session.coordinates is None

    @pytest.mark.asyncio
    async def test_read_latest_empty_is_waiting(self, rendezvous_store):
        session = await rendezvous_store.read_latest()
        assert session.status == TrackingStatus.WAITING

    @pytest.mark.asyncio
    async def test_read_latest_returns_most_recent(self, rendezvous_store, clock):
        await rendezvous_store.mark_requested("dev-1", "dev-1")
        clock.advance(5)
        await rendezvous_store.complete("dev-2", "dev-2", Coordinates(1.0, 2.0))
        latest = await rendezvous_store.read_latest()
        assert latest.session_key == "dev-2"
        assert latest.status == TrackingStatus.OK

    @pytest.mark.asyncio
    async def test_empty_key_rejected(self, rendezvous_store):
        with pytest.raises(InvalidArgumentError):
            await rendezvous_store.read("")


class TestTransitions:
    """Tests for mark_requested / complete / fail"""

    @pytest.mark.asyncio
    async def test_mark_requested_stamps_times(self, rendezvous_store, clock):
        session = await rendezvous_store.mark_requested("dev-1", "dev-1")
        assert session.status == TrackingStatus.REQUESTED
        assert session.requested_at == clock.now
        assert session.updated_at == clock.now

    @pytest.mark.asyncio
    async def test_complete_stores_coordinates(self, rendezvous_store, clock):
        await rendezvous_store.mark_requested("dev-1", "dev-1")
        clock.advance(3)
        await rendezvous_store.complete("dev-1", "dev-1", Coordinates(1.0, 2.0, 15.0, "gps"))

        session = await rendezvous_store.read("dev-1")
        assert session.status == TrackingStatus.OK
        assert session.coordinates == Coordinates(1.0, 2.0, 15.0, "gps")
        assert session.updated_at == clock.now

    @pytest.mark.asyncio
    async def test_new_request_clears_previous_answer(self, rendezvous_store):
        await rendezvous_store.complete("dev-1", "dev-1", Coordinates(1.0, 2.0))
        await rendezvous_store.mark_requested("dev-1", "dev-1")

        session = await rendezvous_store.read("dev-1")
        assert session.status == TrackingStatus.REQUESTED
        assert session.coordinates is None
        assert session.error is None

    @pytest.mark.asyncio
    async def test_new_request_clears_previous_error(self, rendezvous_store):
        await rendezvous_store.fail("dev-1", "dev-1", "GPS disabled")
        await rendezvous_store.mark_requested("dev-1", "dev-1")
        session = await rendezvous_store.read("dev-1")
        assert session.error is None

    @pytest.mark.asyncio
    async def test_fail_drops_coordinates(self, rendezvous_store):
        await rendezvous_store.complete("dev-1", "dev-1", Coordinates(1.0, 2.0))
        await rendezvous_store.fail("dev-1", "dev-1", "Location permission denied")

        session = await rendezvous_store.read("dev-1")
        assert session.status == TrackingStatus.ERROR
        assert session.error == "Location permission denied"
        assert session.coordinates is None

    @pytest.mark.asyncio
    async def test_complete_without_coordinates_leaves_state(self, rendezvous_store):
        await rendezvous_store.mark_requested("dev-1", "dev-1")
        with pytest.raises(InvalidArgumentError):
            await rendezvous_store.complete("dev-1", "dev-1", None)
        session = await rendezvous_store.read("dev-1")
        assert session.status == TrackingStatus.REQUESTED

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, rendezvous_store):
        await rendezvous_store.mark_requested("dev-1", "dev-1")
        await rendezvous_store.complete("dev-2", "dev-2", Coordinates(5.0, 6.0))

        first = await rendezvous_store.read("dev-1")
        second = await rendezvous_store.read("dev-2")
        assert first.status == TrackingStatus.REQUESTED
        assert first.coordinates is None
        assert second.coordinates == Coordinates(5.0, 6.0)


class TestConcurrency:
    """Tests for per-key serialization of read-modify-write transitions"""

    @pytest.fixture
    def yielding_repository(self):
        return YieldingSessionRepository()

    @pytest.fixture
    def store(self, yielding_repository, clock):
        return RendezvousStore(session_repository=yielding_repository, clock=clock)

    @pytest.mark.asyncio
    async def test_transitions_on_one_key_do_not_overlap(self, store, yielding_repository):
        await asyncio.gather(
            store.complete("dev-1", "dev-1", Coordinates(1.0, 2.0)),
            store.mark_requested("dev-1", "dev-1"),
            store.fail("dev-1", "dev-1", "timeout"),
        )
        assert yielding_repository.max_in_flight == 1
        assert yielding_repository.in_flight == 0

    @pytest.mark.asyncio
    async def test_failure_after_new_request_keeps_new_request_time(self, store, clock):
        await store.mark_requested("dev-1", "dev-1")
        await store.complete("dev-1", "dev-1", Coordinates(1.0, 2.0))
        clock.advance(10)

        await asyncio.gather(
            store.mark_requested("dev-1", "dev-1"),
            store.fail("dev-1", "dev-1", "timeout"),
        )

        session = await store.read("dev-1")
        assert session.status == TrackingStatus.ERROR
        assert session.requested_at == clock.now

    @pytest.mark.asyncio
    async def test_completion_after_new_request_keeps_new_request_time(self, store, clock):
        await store.mark_requested("dev-1", "dev-1")
        await store.fail("dev-1", "dev-1", "timeout")
        clock.advance(10)

        await asyncio.gather(
            store.mark_requested("dev-1", "dev-1"),
            store.complete("dev-1", "dev-1", Coordinates(1.0, 2.0)),
        )

        session = await store.read("dev-1")
        assert session.status == TrackingStatus.OK
        assert session.coordinates == Coordinates(1.0, 2.0)
        assert session.requested_at == clock.now

    @pytest.mark.asyncio
    async def test_different_keys_run_in_parallel(self, store, yielding_repository):
        await asyncio.gather(
            store.mark_requested("dev-1", "dev-1"),
            store.mark_requested("dev-2", "dev-2"),
        )
        assert yielding_repository.max_in_flight == 2


class TestLocks:
    """Tests for the per-key lock table"""

    @pytest.mark.asyncio
    async def test_locks_released_after_transitions(self, rendezvous_store):
        for index in range(50):
            key = f"dev-{index}"
            await rendezvous_store.mark_requested(key, key)
            await rendezvous_store.complete(key, key, Coordinates(1.0, 2.0))
        gc.collect()
        assert len(rendezvous_store._locks) == 0

    @pytest.mark.asyncio
    async def test_lock_entry_dropped_when_unreferenced(self, rendezvous_store):
        lock = rendezvous_store._lock_for("dev-1")
        assert rendezvous_store._lock_for("dev-1") is lock
        del lock
        gc.collect()
        assert "dev-1" not in rendezvous_store._locks
