"""
In-process repositories.

Used when STORE_BACKEND=memory (local development without MongoDB) and by
the test suite. State lives for the lifetime of the process, like the
original in-RAM device list.
"""
# Standard library imports
from dataclasses import replace
from typing import Dict, List, Optional

# Local application imports
from ...domain.models.device import Device
from ...domain.models.tracking_session import TrackingSession
from ...domain.repositories.device_repository import DeviceRepository
from ...domain.repositories.tracking_session_repository import TrackingSessionRepository


class InMemoryDeviceRepository(DeviceRepository):
    """Dict-backed DeviceRepository; preserves first-registration order"""
    
    def __init__(self) -> None:
        self._devices: Dict[str, Device] = {}
    
    async def find_by_id(self, device_id: str) -> Optional[Device]:
        device = self._devices.get(device_id)
        return replace(device) if device else None
    
    async def find_by_token(self, token: str) -> Optional[Device]:
        matches = [device for device in self._devices.values() if device.token == token]
        if not matches:
            return None
        latest = max(matches, key=lambda device: device.last_seen.timestamp() if device.last_seen else 0.0)
        return replace(latest)
    
    async def find_all(self) -> List[Device]:
        return [replace(device) for device in self._devices.values()]
    
    async def save(self, device: Device) -> Device:
        # dict keeps the slot of an existing key, so order stays first-registration
        self._devices[device.id] = replace(device)
        return device


class InMemoryTrackingSessionRepository(TrackingSessionRepository):
    """Dict-backed TrackingSessionRepository"""
    
    def __init__(self) -> None:
        self._sessions: Dict[str, TrackingSession] = {}
    
    async def find_by_key(self, session_key: str) -> Optional[TrackingSession]:
        session = self._sessions.get(session_key)
        return replace(session) if session else None
    
    async def find_latest(self) -> Optional[TrackingSession]:
        if not self._sessions:
            return None
        latest = max(
            self._sessions.values(),
            key=lambda session: session.updated_at.timestamp() if session.updated_at else 0.0,
        )
        return replace(latest)
    
    async def save(self, session: TrackingSession) -> TrackingSession:
        self._sessions[session.session_key] = replace(session, stale=False)
        return session
