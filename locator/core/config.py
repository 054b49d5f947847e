# Standard library imports
import os
from typing import Final, List, Optional


class Settings:
    """
    Application settings loaded from environment variables.
    
    This class centralizes all configuration settings for the application.
    All settings are loaded from environment variables with sensible defaults.
    """
    
    def __init__(self) -> None:
        # Database Configuration
        self.mongo_uri: Final[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_database_name: Final[str] = os.getenv("MONGO_DB_NAME", "device_locator")
        # "mongo" or "memory"
        self.store_backend: Final[str] = os.getenv("STORE_BACKEND", "mongo").strip().lower()
        
        # Firebase Cloud Messaging Configuration
        self.firebase_key_path: Final[str] = os.getenv("FIREBASE_KEY_PATH", "firebase-key.json")
        
        # Rendezvous Configuration
        self.request_stale_after_seconds: Final[int] = int(
            os.getenv("REQUEST_STALE_AFTER_SECONDS", "120")
        )
        
        # HTTP / Logging Configuration
        self.cors_origins: Final[List[str]] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)
    
    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
