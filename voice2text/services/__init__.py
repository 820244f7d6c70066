"""Services layer for Voice2Text application logic."""

from .publisher import SessionPublisher, DEFAULT_SESSION_TOPIC
from .recording_service import RecordingService

__all__ = [
    "SessionPublisher",
    "DEFAULT_SESSION_TOPIC",
    "RecordingService",
]
