# Standard library imports
from typing import Optional, Dict, Any

# External package imports
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

# Local application imports
from ...domain.repositories.tracking_session_repository import TrackingSessionRepository
from ...domain.models.tracking_session import Coordinates, TrackingSession, TrackingStatus
from ...domain.constants import SessionFields
from ...domain.exceptions import StoreUnavailableError
from ...utils.datetime_utils import ensure_utc
from .mongo_connection import get_session_collection


class MongoTrackingSessionRepository(TrackingSessionRepository):
    """MongoDB implementation of TrackingSessionRepository (_id = session key)"""
    
    def __init__(self, session_collection: Optional[AsyncIOMotorCollection] = None) -> None:
        self.session_collection = session_collection if session_collection is not None else get_session_collection()
    
    async def find_by_key(self, session_key: str) -> Optional[TrackingSession]:
        if not session_key:
            return None
        
        try:
            document = await self.session_collection.find_one({SessionFields.MONGO_ID: session_key})
        except PyMongoError as e:
            raise StoreUnavailableError(f"Error reading tracking session: {str(e)}") from e
        
        return self._document_to_session(document) if document else None
    
    async def find_latest(self) -> Optional[TrackingSession]:
        try:
            document = await self.session_collection.find_one(
                {}, sort=[(SessionFields.UPDATED_AT, DESCENDING)]
            )
        except PyMongoError as e:
            raise StoreUnavailableError(f"Error reading latest tracking session: {str(e)}") from e
        
        return self._document_to_session(document) if document else None
    
    async def save(self, session: TrackingSession) -> TrackingSession:
        """Replace the whole document so no field of a superseded answer survives"""
        document = self._session_to_document(session)
        try:
            await self.session_collection.replace_one(
                {SessionFields.MONGO_ID: session.session_key},
                document,
                upsert=True,
            )
        except PyMongoError as e:
            raise StoreUnavailableError(f"Error saving tracking session: {str(e)}") from e
        
        return session
    
    def _document_to_session(self, document: Dict[str, Any]) -> TrackingSession:
        """Convert MongoDB document to TrackingSession domain model"""
        coordinates = None
        if document.get(SessionFields.LATITUDE) is not None and document.get(SessionFields.LONGITUDE) is not None:
            coordinates = Coordinates(
                latitude=document[SessionFields.LATITUDE],
                longitude=document[SessionFields.LONGITUDE],
                accuracy=document.get(SessionFields.ACCURACY),
                provider=document.get(SessionFields.PROVIDER),
            )
        
        return TrackingSession(
            session_key=document.get(SessionFields.SESSION_KEY) or str(document[SessionFields.MONGO_ID]),
            status=TrackingStatus(document.get(SessionFields.STATUS, TrackingStatus.WAITING.value)),
            device_id=document.get(SessionFields.DEVICE_ID),
            coordinates=coordinates,
            error=document.get(SessionFields.ERROR),
            requested_at=ensure_utc(document.get(SessionFields.REQUESTED_AT)),
            updated_at=ensure_utc(document.get(SessionFields.UPDATED_AT)),
        )
    
    def _session_to_document(self, session: TrackingSession) -> Dict[str, Any]:
        """Convert TrackingSession domain model to MongoDB document"""
        document: Dict[str, Any] = {
            SessionFields.MONGO_ID: session.session_key,
            SessionFields.SESSION_KEY: session.session_key,
            SessionFields.STATUS: session.status.value,
            SessionFields.DEVICE_ID: session.device_id,
            SessionFields.ERROR: session.error,
            SessionFields.REQUESTED_AT: session.requested_at,
            SessionFields.UPDATED_AT: session.updated_at,
        }
        
        if session.coordinates is not None:
            document[SessionFields.LATITUDE] = session.coordinates.latitude
            document[SessionFields.LONGITUDE] = session.coordinates.longitude
            document[SessionFields.ACCURACY] = session.coordinates.accuracy
            document[SessionFields.PROVIDER] = session.coordinates.provider
        
        return document
