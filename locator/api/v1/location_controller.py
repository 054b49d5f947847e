# Standard library imports
from typing import List, Optional

# External package imports
from fastapi import APIRouter, Query, Response, status

# Local application imports
from ...application.dto.device_dto import DeviceResponse, RegisterDeviceRequest, SuccessResponse
from ...application.dto.location_dto import (
    ReceiveLocationRequest,
    ReportErrorRequest,
    RequestLocationRequest,
    TrackingStatusResponse,
)
from ...application.services.location_coordinator import LocationCoordinator
from ...di.container import get_container

router = APIRouter(tags=["location"])


def _coordinator() -> LocationCoordinator:
    return get_container().get(LocationCoordinator)


@router.post("/register-device", response_model=SuccessResponse, response_model_exclude_none=True)
async def register_device(request: RegisterDeviceRequest) -> SuccessResponse:
    """
    Register a device or refresh its push token (called by the mobile app on start-up)
    
    Args:
        request: deviceId and FCM token
        
    Returns:
        SuccessResponse acknowledging the registration
    """
    await _coordinator().register_device(request.device_id or "", request.token or "")
    return SuccessResponse(message="Device registered")


@router.get("/devices", response_model=List[DeviceResponse])
async def list_devices() -> List[DeviceResponse]:
    """List all registered devices"""
    devices = await _coordinator().list_devices()
    return [DeviceResponse.from_device(device) for device in devices]


@router.post("/request-location", response_model=SuccessResponse, response_model_exclude_none=True)
async def request_location(request: RequestLocationRequest) -> SuccessResponse:
    """
    Ask a device to report its position
    
    Sends a silent REQUEST_GPS push; the answer arrives later through
    /receive-location and is read by polling /get-status?deviceId=<deviceId>.
    """
    session = await _coordinator().request_tracking(
        device_id=request.device_id,
        device_token=request.device_token,
    )
    return SuccessResponse(device_id=session.session_key)


@router.post("/receive-location")
async def receive_location(request: ReceiveLocationRequest) -> Response:
    """Coordinates pushed back by a device"""
    await _coordinator().report_location(request.device_id or "", request.to_coordinates())
    return Response(status_code=status.HTTP_200_OK)


@router.post("/report-error")
async def report_error(request: ReportErrorRequest) -> Response:
    """A device could not produce a fix (permissions, GPS off, timeout)"""
    await _coordinator().report_failure(request.device_id or "", request.error)
    return Response(status_code=status.HTTP_200_OK)


@router.get("/get-status", response_model=TrackingStatusResponse, response_model_exclude_none=True)
async def get_status(
    device_id: Optional[str] = Query(default=None, alias="deviceId"),
) -> TrackingStatusResponse:
    """
    Poll the tracking status
    
    Args:
        device_id: Session to read; without it the most recently updated session is returned
        
    Returns:
        TrackingStatusResponse, {"status": "WAITING"} when nothing happened yet
    """
    session = await _coordinator().get_status(device_id)
    return TrackingStatusResponse.from_session(session)
