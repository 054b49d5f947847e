from abc import ABC, abstractmethod
from typing import Dict


# Data payload understood by the mobile app as "report your position now"
REQUEST_GPS_COMMAND: Dict[str, str] = {"command": "REQUEST_GPS"}


class PushSender(ABC):
    """Interface for the push-delivery transport used to wake devices"""
    
    def initialize(self) -> bool:
        """Prepare the transport at start-up; False means sends will fail until fixed"""
        return True
    
    @abstractmethod
    async def send(self, token: str, data: Dict[str, str], priority: str = "high") -> str:
        """
        Deliver a data-only message to one device.
        
        Args:
            token: Push-delivery address of the device
            data: Opaque command payload (string values only)
            priority: Delivery priority hint ("high" or "normal")
            
        Returns:
            Transport message ID
            
        Raises:
            PushDeliveryFailedError: If the transport did not accept the message
        """
        pass
