from .device_dto import DeviceResponse, RegisterDeviceRequest, SuccessResponse
from .location_dto import (
    ReceiveLocationRequest,
    ReportErrorRequest,
    RequestLocationRequest,
    TrackingStatusResponse,
)

__all__ = [
    "DeviceResponse",
    "RegisterDeviceRequest",
    "SuccessResponse",
    "ReceiveLocationRequest",
    "ReportErrorRequest",
    "RequestLocationRequest",
    "TrackingStatusResponse",
]
