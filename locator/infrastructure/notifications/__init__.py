"""Push-delivery infrastructure for waking devices"""

from .firebase_push_sender import FirebasePushSender

__all__ = [
    "FirebasePushSender",
]
