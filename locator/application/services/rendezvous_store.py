# Standard library imports
import asyncio
import logging
import weakref
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

# Local application imports
from ...domain.exceptions import InvalidArgumentError
from ...domain.models.tracking_session import Coordinates, TrackingSession, TrackingStatus
from ...domain.repositories.tracking_session_repository import TrackingSessionRepository
from ...domain.state_machine import TrackingStateMachine
from ...utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class RendezvousStore:
    """
    Keyed rendezvous slots where a tracking request meets its answer.
    
    Each session key holds at most one pending-or-completed record. All
    transitions for one key run under that key's asyncio.Lock so a report
    and a new request cannot interleave into a mixed record. Reads never
    take the lock and never block on a pending answer; callers poll.
    """
    
    def __init__(
        self,
        session_repository: TrackingSessionRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.session_repository = session_repository
        self.clock = clock
        # entries vanish once no coroutine holds or awaits the lock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()
    
    def _lock_for(self, session_key: str) -> asyncio.Lock:
        lock = self._locks.get(session_key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_key] = lock
        return lock
    
    async def _current(self, session_key: str) -> TrackingSession:
        session = await self.session_repository.find_by_key(session_key)
        return session if session is not None else TrackingSession.waiting(session_key)
    
    async def _transition(
        self,
        session_key: str,
        target: TrackingStatus,
        build: Callable[[TrackingSession, datetime], TrackingSession],
    ) -> TrackingSession:
        if not session_key:
            raise InvalidArgumentError("Session key is required")
        
        lock = self._lock_for(session_key)
        async with lock:
            current = await self._current(session_key)
            TrackingStateMachine.ensure_transition(current.status, target)
            updated = build(current, self.clock())
            saved = await self.session_repository.save(updated)
        
        logger.info(
            f"Session {session_key}: {current.status.value} -> {saved.status.value}"
        )
        return saved
    
    async def mark_requested(self, session_key: str, device_id: str) -> TrackingSession:
        """
        Move a session to REQUESTED, dropping any previous answer.
        
        Must only be called once the wake signal was accepted by the push
        transport.
        """
        return await self._transition(
            session_key,
            TrackingStatus.REQUESTED,
            lambda current, now: TrackingSession(
                session_key=session_key,
                status=TrackingStatus.REQUESTED,
                device_id=device_id,
                requested_at=now,
                updated_at=now,
            ),
        )
    
    async def complete(
        self,
        session_key: str,
        device_id: str,
        coordinates: Optional[Coordinates],
    ) -> TrackingSession:
        """Store a location answer and move the session to OK"""
        if coordinates is None:
            raise InvalidArgumentError("Coordinates are required")
        
        return await self._transition(
            session_key,
            TrackingStatus.OK,
            lambda current, now: replace(
                current,
                status=TrackingStatus.OK,
                device_id=device_id,
                coordinates=coordinates,
                error=None,
                updated_at=now,
                stale=False,
            ),
        )
    
    async def fail(self, session_key: str, device_id: str, message: str) -> TrackingSession:
        """Record a device or delivery failure and move the session to ERROR"""
        return await self._transition(
            session_key,
            TrackingStatus.ERROR,
            lambda current, now: replace(
                current,
                status=TrackingStatus.ERROR,
                device_id=device_id,
                coordinates=None,
                error=message,
                updated_at=now,
                stale=False,
            ),
        )
    
    async def read(self, session_key: str) -> TrackingSession:
        """Current state of a session; WAITING if the key was never written"""
        if not session_key:
            raise InvalidArgumentError("Session key is required")
        return await self._current(session_key)
    
    async def read_latest(self) -> TrackingSession:
        """Most recently updated session of any key; WAITING if none exist"""
        session = await self.session_repository.find_latest()
        return session if session is not None else TrackingSession.waiting("")
