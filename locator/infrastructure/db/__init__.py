from .mongo_connection import get_database, get_device_collection, get_session_collection, ensure_indexes
from .mongo_device_repository import MongoDeviceRepository
from .mongo_session_repository import MongoTrackingSessionRepository
from .memory_repositories import InMemoryDeviceRepository, InMemoryTrackingSessionRepository

__all__ = [
    "get_database",
    "get_device_collection",
    "get_session_collection",
    "ensure_indexes",
    "MongoDeviceRepository",
    "MongoTrackingSessionRepository",
    "InMemoryDeviceRepository",
    "InMemoryTrackingSessionRepository",
]
