from .device import Device
from .tracking_session import Coordinates, TrackingSession, TrackingStatus

__all__ = ["Device", "Coordinates", "TrackingSession", "TrackingStatus"]
