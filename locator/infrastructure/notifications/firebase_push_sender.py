"""
Firebase Cloud Messaging (FCM) Push Sender
==========================================

Wakes the mobile app with a silent, data-only message through the Firebase
Admin SDK. The SDK is initialized once from the service-account key; the
blocking send call runs in a worker thread so the event loop stays free.
"""

# Standard library imports
import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional

# External package imports
import firebase_admin
from firebase_admin import credentials, exceptions as firebase_exceptions, messaging

# Local application imports
from ...domain.exceptions import PushDeliveryFailedError
from ...domain.services.push_sender import PushSender

logger = logging.getLogger(__name__)

# Name used for the SDK app so we never clash with another default app
FIREBASE_APP_NAME = "device-locator"


class FirebasePushSender(PushSender):
    """PushSender backed by FCM"""
    
    def __init__(self, key_path: str) -> None:
        self.key_path = Path(key_path)
        self._app: Optional[Any] = None
    
    def initialize(self) -> bool:
        """
        Initialize Firebase Admin SDK using the service account key.
        
        Safe to call repeatedly; the app instance is cached.
        
        Returns:
            True if the SDK is ready to send, False otherwise
        """
        if self._app is not None:
            return True
        
        try:
            self._app = firebase_admin.get_app(FIREBASE_APP_NAME)
            return True
        except ValueError:
            # Not initialized yet, proceed with initialization
            pass
        
        if not self.key_path.exists():
            logger.warning(
                f"Firebase key file not found: {self.key_path}. "
                f"Push notifications will not work until it is added."
            )
            return False
        
        try:
            cred = credentials.Certificate(str(self.key_path))
            self._app = firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME)
        except (ValueError, IOError) as e:
            logger.error(f"Failed to initialize Firebase: {e}", exc_info=True)
            return False
        
        logger.info("Firebase Admin SDK initialized successfully")
        return True
    
    def _build_message(self, token: str, data: Dict[str, str], priority: str) -> messaging.Message:
        """Data-only message: no notification block, so the app handles it silently"""
        android_config = messaging.AndroidConfig(
            priority="high" if priority == "high" else "normal",
            direct_boot_ok=True,
        )
        
        # iOS only wakes a background app for content-available pushes at priority 5
        apns_config = messaging.APNSConfig(
            headers={"apns-push-type": "background", "apns-priority": "5"},
            payload=messaging.APNSPayload(aps=messaging.Aps(content_available=True)),
        )
        
        return messaging.Message(
            token=token,
            data={key: str(value) for key, value in data.items()},
            android=android_config,
            apns=apns_config,
        )
    
    async def send(self, token: str, data: Dict[str, str], priority: str = "high") -> str:
        if not token:
            raise PushDeliveryFailedError("Push token is empty")
        
        if not self.initialize():
            raise PushDeliveryFailedError("Firebase is not initialized")
        
        message = self._build_message(token, data, priority)
        
        try:
            message_id = await asyncio.to_thread(messaging.send, message, app=self._app)
        except messaging.UnregisteredError as e:
            logger.warning(f"Push token is no longer registered (...{token[-6:]})")
            raise PushDeliveryFailedError(
                f"Device token is unregistered: {e}", {"code": getattr(e, "code", None)}
            ) from e
        except firebase_exceptions.FirebaseError as e:
            logger.error(f"Error sending FCM message: {e}")
            raise PushDeliveryFailedError(str(e), {"code": getattr(e, "code", None)}) from e
        except ValueError as e:
            # raised by the SDK for malformed messages or tokens
            logger.error(f"Invalid FCM message: {e}")
            raise PushDeliveryFailedError(str(e)) from e
        
        logger.debug(f"FCM message sent: {message_id}")
        return message_id
