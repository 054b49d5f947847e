from typing import TYPE_CHECKING
from ...core.config import get_settings
from ...domain.repositories.device_repository import DeviceRepository
from ...domain.repositories.tracking_session_repository import TrackingSessionRepository
from ...infrastructure.db.mongo_device_repository import MongoDeviceRepository
from ...infrastructure.db.mongo_session_repository import MongoTrackingSessionRepository
from ...infrastructure.db.memory_repositories import (
    InMemoryDeviceRepository,
    InMemoryTrackingSessionRepository,
)

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class RepositoryProvider:
    """Repository registration provider - wires domain interfaces to infrastructure implementations"""
    
    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register all repository implementations for the configured STORE_BACKEND.
        """
        backend = get_settings().store_backend
        
        if backend == "memory":
            container.register_singleton(DeviceRepository, InMemoryDeviceRepository())
            container.register_singleton(TrackingSessionRepository, InMemoryTrackingSessionRepository())
            return
        
        if backend != "mongo":
            raise ValueError(f"Unknown STORE_BACKEND '{backend}' (expected 'mongo' or 'memory')")
        
        # Domain interfaces -> Infrastructure implementations
        container.register_singleton(
            DeviceRepository,
            MongoDeviceRepository(device_collection=container.get("device_collection"))
        )
        
        container.register_singleton(
            TrackingSessionRepository,
            MongoTrackingSessionRepository(session_collection=container.get("session_collection"))
        )
