# Standard library imports
from typing import Optional, List, Dict, Any

# External package imports
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

# Local application imports
from ...domain.repositories.device_repository import DeviceRepository
from ...domain.models.device import Device
from ...domain.constants import DeviceFields
from ...domain.exceptions import StoreUnavailableError
from ...utils.datetime_utils import ensure_utc
from .mongo_connection import get_device_collection


class MongoDeviceRepository(DeviceRepository):
    """MongoDB implementation of DeviceRepository (one document per device, _id = device ID)"""
    
    def __init__(self, device_collection: Optional[AsyncIOMotorCollection] = None) -> None:
        self.device_collection = device_collection if device_collection is not None else get_device_collection()
    
    async def find_by_id(self, device_id: str) -> Optional[Device]:
        """Find device by ID"""
        if not device_id:
            return None
        
        try:
            document = await self.device_collection.find_one({DeviceFields.MONGO_ID: device_id})
        except PyMongoError as e:
            raise StoreUnavailableError(f"Error finding device by ID: {str(e)}") from e
        
        if document is None:
            return None
        return self._document_to_device(document)
    
    async def find_by_token(self, token: str) -> Optional[Device]:
        """Find the most recently seen device holding a token"""
        if not token:
            return None
        
        try:
            document = await self.device_collection.find_one(
                {DeviceFields.TOKEN: token},
                sort=[(DeviceFields.LAST_SEEN, DESCENDING)],
            )
        except PyMongoError as e:
            raise StoreUnavailableError(f"Error finding device by token: {str(e)}") from e
        
        if document is None:
            return None
        return self._document_to_device(document)
    
    async def find_all(self) -> List[Device]:
        """List all devices in registration order"""
        try:
            cursor = self.device_collection.find({}).sort(DeviceFields.REGISTERED_AT, ASCENDING)
            devices = []
            async for document in cursor:
                devices.append(self._document_to_device(document))
            return devices
        except PyMongoError as e:
            raise StoreUnavailableError(f"Error listing devices: {str(e)}") from e
    
    async def save(self, device: Device) -> Device:
        """Upsert device by ID; registered_at is only written on first insert"""
        if not device:
            raise ValueError("Device cannot be None")
        
        device_dict = self._device_to_dict(device)
        try:
            await self.device_collection.update_one(
                {DeviceFields.MONGO_ID: device.id},
                {
                    "$set": device_dict,
                    "$setOnInsert": {DeviceFields.REGISTERED_AT: device.last_seen},
                },
                upsert=True,
            )
        except PyMongoError as e:
            raise StoreUnavailableError(f"Error saving device: {str(e)}") from e
        
        return device
    
    def _document_to_device(self, document: Dict[str, Any]) -> Device:
        """Convert MongoDB document to Device domain model"""
        if not document:
            raise ValueError("Invalid document: document is None or empty")
        
        return Device(
            id=document.get(DeviceFields.ID) or str(document[DeviceFields.MONGO_ID]),
            token=document.get(DeviceFields.TOKEN, ""),
            last_seen=ensure_utc(document.get(DeviceFields.LAST_SEEN)),
        )
    
    def _device_to_dict(self, device: Device) -> Dict[str, Any]:
        """Convert Device domain model to MongoDB document fields"""
        return {
            DeviceFields.ID: device.id,
            DeviceFields.TOKEN: device.token,
            DeviceFields.LAST_SEEN: device.last_seen,
        }
