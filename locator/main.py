# Standard library imports
from pathlib import Path
from contextlib import asynccontextmanager
import logging

# External package imports
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Local application imports
from .api.v1 import location_router, register_exception_handlers
from .core.config import get_settings
from .di.container import get_container
from .domain.services.push_sender import PushSender
from .infrastructure.db.mongo_connection import close_connection, ensure_indexes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    
    Builds the DI container, prepares MongoDB indexes and initializes the
    Firebase SDK. Neither a missing Firebase key nor an unreachable
    MongoDB stops the server from starting; the affected requests fail
    individually instead.
    """
    settings = get_settings()
    container = get_container()
    
    if settings.store_backend == "mongo":
        try:
            await ensure_indexes()
        except Exception as e:
            logger.error(f"Failed to ensure MongoDB indexes: {e}", exc_info=True)
    
    if container.get(PushSender).initialize():
        logger.info("Push delivery ready")
    
    logger.info(f"Device locator started (store backend: {settings.store_backend})")
    
    yield
    
    if settings.store_backend == "mongo":
        close_connection()
    
    logger.info("Application shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.
    
    This function sets up the FastAPI application with:
    - Environment variable loading
    - Log level for the locator package
    - CORS middleware configuration
    - Error handlers and API route registration
    
    Returns:
        Configured FastAPI application instance
    """
    # Load environment variables from .env file
    env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_path)
    
    settings = get_settings()
    logging.getLogger("locator").setLevel(settings.log_level)
    
    application = FastAPI(
        title="Device Locator API",
        version="1.0.0",
        description="Push-triggered device location relay",
        lifespan=lifespan
    )
    
    # The mobile app and the web page are served from other origins
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    register_exception_handlers(application)
    application.include_router(location_router, prefix="/api")
    
    @application.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}
    
    return application


# Create application instance
app = create_application()
