from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ...domain.models.device import Device
from ...utils.datetime_utils import to_iso


class RegisterDeviceRequest(BaseModel):
    """DTO for device registration request (sent by the mobile app on start-up)"""
    model_config = ConfigDict(populate_by_name=True)
    
    device_id: Optional[str] = Field(default=None, alias="deviceId")
    token: Optional[str] = None  # FCM registration token


class DeviceResponse(BaseModel):
    """DTO for device response"""
    model_config = ConfigDict(populate_by_name=True)
    
    device_id: str = Field(alias="deviceId")
    token: str
    last_seen: Optional[str] = Field(default=None, alias="lastSeen")
    
    @classmethod
    def from_device(cls, device: Device) -> "DeviceResponse":
        return cls(
            device_id=device.id,
            token=device.token,
            last_seen=to_iso(device.last_seen),
        )


class SuccessResponse(BaseModel):
    """DTO for plain acknowledgements"""
    model_config = ConfigDict(populate_by_name=True)
    
    success: bool = True
    message: Optional[str] = None
    device_id: Optional[str] = Field(default=None, alias="deviceId")  # session key to poll with
