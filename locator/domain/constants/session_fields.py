"""Constants for TrackingSession model field names"""


class SessionFields:
    """Field name constants for TrackingSession model"""
    SESSION_KEY = "session_key"
    STATUS = "status"
    DEVICE_ID = "device_id"
    LATITUDE = "lat"
    LONGITUDE = "lng"
    ACCURACY = "accuracy"
    PROVIDER = "provider"
    ERROR = "error"
    REQUESTED_AT = "requested_at"
    UPDATED_AT = "updated_at"
    
    # MongoDB specific
    MONGO_ID = "_id"
