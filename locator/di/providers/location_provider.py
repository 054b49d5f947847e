from datetime import timedelta
from typing import TYPE_CHECKING
from ...core.config import get_settings
from ...domain.repositories.device_repository import DeviceRepository
from ...domain.repositories.tracking_session_repository import TrackingSessionRepository
from ...domain.services.push_sender import PushSender
from ...application.services.device_registry import DeviceRegistry
from ...application.services.rendezvous_store import RendezvousStore
from ...application.services.location_coordinator import LocationCoordinator

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class LocationProvider:
    """Location service provider - registers the registry, store and coordinator"""
    
    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register location services as singletons.
        The store holds the per-session locks, so there must be exactly one.
        """
        device_registry = DeviceRegistry(device_repository=container.get(DeviceRepository))
        rendezvous_store = RendezvousStore(session_repository=container.get(TrackingSessionRepository))
        
        container.register_singleton(
            LocationCoordinator,
            LocationCoordinator(
                device_registry=device_registry,
                rendezvous_store=rendezvous_store,
                push_sender=container.get(PushSender),
                stale_after=timedelta(seconds=get_settings().request_stale_after_seconds),
            )
        )
