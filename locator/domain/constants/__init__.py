"""Constants for domain model field names"""

from .device_fields import DeviceFields
from .session_fields import SessionFields

__all__ = [
    "DeviceFields",
    "SessionFields",
]
