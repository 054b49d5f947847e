from typing import TYPE_CHECKING
from ...core.config import get_settings
from ...domain.services.push_sender import PushSender
from ...infrastructure.notifications.firebase_push_sender import FirebasePushSender

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class PushProvider:
    """Push transport provider - registers the FCM sender as the PushSender"""
    
    @staticmethod
    def register(container: "BaseContainer") -> None:
        container.register_singleton(
            PushSender,
            FirebasePushSender(key_path=get_settings().firebase_key_path),
        )
