"""Constants for Device model field names"""


class DeviceFields:
    """Field name constants for Device model"""
    ID = "device_id"
    TOKEN = "token"
    LAST_SEEN = "last_seen"
    REGISTERED_AT = "registered_at"
    
    # MongoDB specific
    MONGO_ID = "_id"  # MongoDB's internal _id field
