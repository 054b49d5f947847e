from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

from ...domain.models.tracking_session import Coordinates, TrackingSession, TrackingStatus
from ...utils.datetime_utils import to_iso


class RequestLocationRequest(BaseModel):
    """DTO for a web client asking a device for its position"""
    model_config = ConfigDict(populate_by_name=True)
    
    device_id: Optional[str] = Field(default=None, alias="deviceId")
    device_token: Optional[str] = Field(default=None, alias="deviceToken")


class ReceiveLocationRequest(BaseModel):
    """DTO for coordinates pushed back by a device"""
    model_config = ConfigDict(populate_by_name=True)
    
    device_id: Optional[str] = Field(default=None, alias="deviceId")
    # strict numbers: JSON booleans and numeric strings are rejected
    lat: Optional[Union[StrictFloat, StrictInt]] = None
    lng: Optional[Union[StrictFloat, StrictInt]] = None
    accuracy: Optional[Union[StrictFloat, StrictInt]] = None
    provider: Optional[str] = None
    
    def to_coordinates(self) -> Optional[Coordinates]:
        """Domain coordinates, or None when latitude or longitude is missing"""
        if self.lat is None or self.lng is None:
            return None
        return Coordinates(
            latitude=self.lat,
            longitude=self.lng,
            accuracy=self.accuracy,
            provider=self.provider,
        )


class ReportErrorRequest(BaseModel):
    """DTO for a device reporting that it could not get a fix"""
    model_config = ConfigDict(populate_by_name=True)
    
    device_id: Optional[str] = Field(default=None, alias="deviceId")
    error: Optional[str] = None


class TrackingStatusResponse(BaseModel):
    """DTO for the polled tracking status"""
    model_config = ConfigDict(populate_by_name=True)
    
    status: str
    device_id: Optional[str] = Field(default=None, alias="deviceId")
    lat: Optional[float] = None
    lng: Optional[float] = None
    accuracy: Optional[float] = None
    provider: Optional[str] = None
    error: Optional[str] = None
    timestamp: Optional[str] = None
    requested_at: Optional[str] = Field(default=None, alias="requestedAt")
    stale: Optional[bool] = None  # only reported while a request is pending
    
    @classmethod
    def from_session(cls, session: TrackingSession) -> "TrackingStatusResponse":
        coordinates = session.coordinates
        return cls(
            status=session.status.value,
            device_id=session.device_id,
            lat=coordinates.latitude if coordinates else None,
            lng=coordinates.longitude if coordinates else None,
            accuracy=coordinates.accuracy if coordinates else None,
            provider=coordinates.provider if coordinates else None,
            error=session.error,
            timestamp=to_iso(session.updated_at),
            requested_at=to_iso(session.requested_at),
            stale=session.stale if session.status == TrackingStatus.REQUESTED else None,
        )
