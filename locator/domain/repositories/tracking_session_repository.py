from abc import ABC, abstractmethod
from typing import Optional
from ..models.tracking_session import TrackingSession


class TrackingSessionRepository(ABC):
    """Repository interface - defines contract for tracking session storage"""
    
    @abstractmethod
    async def find_by_key(self, session_key: str) -> Optional[TrackingSession]:
        """Find the session stored under a key, None if never written"""
        pass
    
    @abstractmethod
    async def find_latest(self) -> Optional[TrackingSession]:
        """Find the most recently updated session of any key"""
        pass
    
    @abstractmethod
    async def save(self, session: TrackingSession) -> TrackingSession:
        """Save session, replacing whatever was stored under its key"""
        pass
