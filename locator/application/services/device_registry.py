# Standard library imports
import logging
from datetime import datetime
from typing import Callable, List

# Local application imports
from ...domain.exceptions import DeviceNotFoundError, InvalidArgumentError
from ...domain.models.device import Device
from ...domain.repositories.device_repository import DeviceRepository
from ...utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Known devices and their current push tokens"""
    
    def __init__(
        self,
        device_repository: DeviceRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.device_repository = device_repository
        self.clock = clock
    
    async def register(self, device_id: str, token: str) -> Device:
        """
        Insert or update a device (last write wins).
        
        Args:
            device_id: Stable installation ID
            token: Current push token
            
        Returns:
            The stored Device with a fresh last_seen
            
        Raises:
            InvalidArgumentError: If device_id or token is empty
        """
        if not device_id or not token:
            raise InvalidArgumentError("deviceId and token are required")
        
        device = Device(id=device_id, token=token, last_seen=self.clock())
        saved_device = await self.device_repository.save(device)
        logger.info(f"Device registered: {saved_device.id}")
        return saved_device
    
    async def list(self) -> List[Device]:
        """Snapshot of all known devices"""
        return list(await self.device_repository.find_all())
    
    async def lookup(self, device_id: str) -> Device:
        if not device_id:
            raise InvalidArgumentError("deviceId is required")
        device = await self.device_repository.find_by_id(device_id.strip())
        if device is None:
            raise DeviceNotFoundError(device_id)
        return device
    
    async def lookup_by_token(self, token: str) -> Device:
        if not token:
            raise InvalidArgumentError("deviceToken is required")
        device = await self.device_repository.find_by_token(token.strip())
        if device is None:
            # never log the full token
            raise DeviceNotFoundError(f"token ...{token.strip()[-6:]}")
        return device
