from .device_repository import DeviceRepository
from .tracking_session_repository import TrackingSessionRepository

__all__ = ["DeviceRepository", "TrackingSessionRepository"]
