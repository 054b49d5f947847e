from .push_sender import PushSender, REQUEST_GPS_COMMAND

__all__ = ["PushSender", "REQUEST_GPS_COMMAND"]
