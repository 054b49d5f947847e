from .location_controller import router as location_router
from .errors import register_exception_handlers


__all__ = ["location_router", "register_exception_handlers"]
