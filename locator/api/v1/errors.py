# Standard library imports
import logging
from typing import Dict, Type

# External package imports
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Local application imports
from ...domain.exceptions import (
    DeviceNotFoundError,
    InvalidArgumentError,
    InvalidStateTransitionError,
    LocatorError,
    PushDeliveryFailedError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


STATUS_BY_ERROR: Dict[Type[LocatorError], int] = {
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    DeviceNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidStateTransitionError: status.HTTP_409_CONFLICT,
    PushDeliveryFailedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StoreUnavailableError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exception: LocatorError) -> int:
    for error_type, status_code in STATUS_BY_ERROR.items():
        if isinstance(exception, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def locator_error_handler(request: Request, exception: LocatorError) -> JSONResponse:
    """Render a domain error as {"error": message} with its mapped status"""
    status_code = status_for(exception)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exception.message}")
    return JSONResponse(status_code=status_code, content={"error": exception.message})


async def validation_error_handler(request: Request, exception: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client errors (400), not 422"""
    errors = exception.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


def register_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(LocatorError, locator_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)
