from .device_registry import DeviceRegistry
from .rendezvous_store import RendezvousStore
from .location_coordinator import LocationCoordinator

__all__ = ["DeviceRegistry", "RendezvousStore", "LocationCoordinator"]
