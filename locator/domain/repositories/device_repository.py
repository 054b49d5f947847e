from abc import ABC, abstractmethod
from typing import List, Optional
from ..models.device import Device


class DeviceRepository(ABC):
    """Repository interface - defines contract for device data access"""
    
    @abstractmethod
    async def find_by_id(self, device_id: str) -> Optional[Device]:
        """Find device by ID"""
        pass
    
    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[Device]:
        """Find the device currently holding a push token"""
        pass
    
    @abstractmethod
    async def find_all(self) -> List[Device]:
        """List all known devices in registration order"""
        pass
    
    @abstractmethod
    async def save(self, device: Device) -> Device:
        """Save device (create or overwrite by ID)"""
        pass
