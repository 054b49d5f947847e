# Standard library imports
import logging
from typing import Optional

# External package imports
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING

# Local application imports
from ...core.config import get_settings
from ...domain.constants import DeviceFields, SessionFields

logger = logging.getLogger(__name__)

# Global MongoDB connection instances (singleton pattern)
_mongo_client: Optional[AsyncIOMotorClient] = None
_mongo_database: Optional[AsyncIOMotorDatabase] = None


def get_database() -> AsyncIOMotorDatabase:
    """
    Get MongoDB database instance (singleton pattern)
    
    Returns:
        MongoDB database instance
    """
    global _mongo_client, _mongo_database
    
    if _mongo_database is not None:
        return _mongo_database
    
    settings = get_settings()
    # Fail fast instead of hanging on an unreachable server
    _mongo_client = AsyncIOMotorClient(
        settings.mongo_uri,
        serverSelectionTimeoutMS=10000,
        connectTimeoutMS=10000,
    )
    _mongo_database = _mongo_client[settings.mongo_database_name]
    return _mongo_database


def get_device_collection() -> AsyncIOMotorCollection:
    """
    Get devices collection from MongoDB
    
    Returns:
        MongoDB collection for registered devices
    """
    return get_database()["devices"]


def get_session_collection() -> AsyncIOMotorCollection:
    """
    Get tracking sessions collection from MongoDB
    
    Returns:
        MongoDB collection for tracking sessions
    """
    return get_database()["tracking_sessions"]


async def ensure_indexes() -> None:
    """Create the secondary indexes the repositories query on"""
    await get_device_collection().create_index([(DeviceFields.TOKEN, ASCENDING)])
    await get_device_collection().create_index([(DeviceFields.REGISTERED_AT, ASCENDING)])
    await get_session_collection().create_index([(SessionFields.UPDATED_AT, DESCENDING)])
    logger.info("MongoDB indexes ensured")


def close_connection() -> None:
    """Close the shared client, if one was opened"""
    global _mongo_client, _mongo_database
    if _mongo_client is not None:
        _mongo_client.close()
    _mongo_client = None
    _mongo_database = None
