# Standard library imports
import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, List, Optional

# Local application imports
from ...domain.exceptions import InvalidArgumentError, PushDeliveryFailedError
from ...domain.models.device import Device
from ...domain.models.tracking_session import Coordinates, TrackingSession
from ...domain.services.push_sender import PushSender, REQUEST_GPS_COMMAND
from ...utils.datetime_utils import utc_now
from .device_registry import DeviceRegistry
from .rendezvous_store import RendezvousStore

logger = logging.getLogger(__name__)

UNKNOWN_DEVICE_ERROR = "Unknown device error"


class LocationCoordinator:
    """
    Orchestrates the request -> push -> callback -> poll cycle.
    
    The coordinator is the only writer of the device registry and the
    rendezvous store. Sessions are keyed by device ID, so concurrent
    requests for different devices never see each other's answers.
    
    The one ordering rule: a session is marked REQUESTED only after the
    push transport accepted the wake signal. A failed send leaves the
    session exactly as it was.
    """
    
    def __init__(
        self,
        device_registry: DeviceRegistry,
        rendezvous_store: RendezvousStore,
        push_sender: PushSender,
        stale_after: timedelta = timedelta(seconds=120),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.device_registry = device_registry
        self.rendezvous_store = rendezvous_store
        self.push_sender = push_sender
        self.stale_after = stale_after
        self.clock = clock
    
    async def register_device(self, device_id: str, token: str) -> Device:
        return await self.device_registry.register(device_id, token)
    
    async def list_devices(self) -> List[Device]:
        return await self.device_registry.list()
    
    async def request_tracking(
        self,
        device_id: Optional[str] = None,
        device_token: Optional[str] = None,
    ) -> TrackingSession:
        """
        Wake a device and open a tracking session for it.
        
        Args:
            device_id: Registered device ID (preferred)
            device_token: Push token, resolved to its device when no ID is given
            
        Returns:
            The session in REQUESTED state
            
        Raises:
            InvalidArgumentError: If neither device_id nor device_token is given
            DeviceNotFoundError: If the device is not registered
            PushDeliveryFailedError: If the wake signal could not be sent
        """
        if device_id:
            device = await self.device_registry.lookup(device_id)
        elif device_token:
            device = await self.device_registry.lookup_by_token(device_token)
        else:
            raise InvalidArgumentError("deviceId or deviceToken is required")
        
        try:
            message_id = await self.push_sender.send(
                device.token, dict(REQUEST_GPS_COMMAND), priority="high"
            )
        except PushDeliveryFailedError:
            logger.warning(f"Wake signal to device {device.id} failed; session left unchanged")
            raise
        
        logger.info(f"Wake signal sent to device {device.id} (message {message_id})")
        return await self.rendezvous_store.mark_requested(device.id, device.id)
    
    async def report_location(
        self,
        device_id: str,
        coordinates: Optional[Coordinates],
    ) -> TrackingSession:
        """
        Store a location sent by a device.
        
        Unsolicited reports are accepted; a device may report whenever it
        has a fix.
        """
        if not device_id:
            raise InvalidArgumentError("deviceId is required")
        if coordinates is None:
            raise InvalidArgumentError("lat and lng are required")
        
        logger.info(
            f"Location received from {device_id}: "
            f"lat {coordinates.latitude}, lng {coordinates.longitude}"
        )
        return await self.rendezvous_store.complete(device_id, device_id, coordinates)
    
    async def report_failure(self, device_id: str, message: Optional[str]) -> TrackingSession:
        if not device_id:
            raise InvalidArgumentError("deviceId is required")
        message = (message or "").strip() or UNKNOWN_DEVICE_ERROR
        logger.warning(f"Device {device_id} reported an error: {message}")
        return await self.rendezvous_store.fail(device_id, device_id, message)
    
    async def get_status(self, session_key: Optional[str] = None) -> TrackingSession:
        """
        Read a session for a poller.
        
        Without a key, returns the most recently updated session. A
        REQUESTED session older than the staleness horizon comes back with
        stale=True.
        """
        if session_key:
            session = await self.rendezvous_store.read(session_key)
        else:
            session = await self.rendezvous_store.read_latest()
        return replace(session, stale=session.is_stale(self.clock(), self.stale_after))
