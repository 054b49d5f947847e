# Standard library imports
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

# Local application imports
from ..exceptions import InvalidArgumentError


@dataclass
class Device:
    """
    Pure domain model for Device entity.
    
    Represents one mobile app installation that can be woken by a push
    message. The id is stable per installation; the token is the FCM
    registration token and may be rotated by the client at any time.
    """
    id: str
    token: str
    last_seen: Optional[datetime] = None
    
    def __post_init__(self) -> None:
        """Business validations"""
        if not self.id or not self.id.strip():
            raise InvalidArgumentError("Device ID is required")
        if not self.token or not self.token.strip():
            raise InvalidArgumentError("Device token is required")
        self.id = self.id.strip()
        self.token = self.token.strip()
