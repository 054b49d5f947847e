# Standard library imports
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional

# Local application imports
from ..exceptions import InvalidArgumentError


class TrackingStatus(str, Enum):
    """Status tag of a tracking session"""
    WAITING = "WAITING"
    REQUESTED = "REQUESTED"
    OK = "OK"
    ERROR = "ERROR"


def _as_float(name: str, value: Any) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidArgumentError(f"{name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{name} must be a number")
    if not math.isfinite(number):
        raise InvalidArgumentError(f"{name} must be a finite number")
    return number


@dataclass(frozen=True)
class Coordinates:
    """
    A GPS fix reported by a device.

    Latitude and longitude are mandatory; accuracy (radius in metres) and
    provider (e.g. "gps", "network", "fused") are whatever the device sent.
    """
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    provider: Optional[str] = None

    def __post_init__(self) -> None:
        latitude = _as_float("Latitude", self.latitude)
        longitude = _as_float("Longitude", self.longitude)
        if not -90.0 <= latitude <= 90.0:
            raise InvalidArgumentError(f"Latitude out of range: {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise InvalidArgumentError(f"Longitude out of range: {longitude}")
        accuracy = None if self.accuracy is None else _as_float("Accuracy", self.accuracy)
        if accuracy is not None and accuracy < 0:
            raise InvalidArgumentError(f"Accuracy cannot be negative: {accuracy}")
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "latitude", latitude)
        object.__setattr__(self, "longitude", longitude)
        object.__setattr__(self, "accuracy", accuracy)


@dataclass
class TrackingSession:
    """
    Pure domain model for one rendezvous slot.
    
    A session is keyed by device id. It carries coordinates only while OK
    and an error message only while ERROR; a key that was never written
    reads as WAITING.
    """
    session_key: str
    status: TrackingStatus = TrackingStatus.WAITING
    device_id: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    error: Optional[str] = None
    requested_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # computed on read, never persisted
    stale: bool = False
    
    @classmethod
    def waiting(cls, session_key: str) -> "TrackingSession":
        """Session for a key with no recorded activity"""
        return cls(session_key=session_key, status=TrackingStatus.WAITING)
    
    def is_stale(self, now: datetime, horizon: timedelta) -> bool:
        """
        True when a request is still unanswered after the staleness horizon.
        
        Only REQUESTED sessions can be stale; answered sessions are final
        until superseded.
        """
        if self.status != TrackingStatus.REQUESTED or self.requested_at is None:
            return False
        return now - self.requested_at > horizon
