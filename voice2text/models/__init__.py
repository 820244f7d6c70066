"""Data models for the Voice2Text application."""

from .audio import AudioStats, AudioBlob, AUDIO_MIME_TYPE, AUDIO_FILENAME
from .events import AudioEvent, SessionEvent
from .session import SessionState, RecordingSession
from .transcription import (
    TextResult,
    AcknowledgedAsync,
    ErrorResult,
    TranscriptionResult,
    ASYNC_ACK_EXPLANATION,
)
from .ui import StatusDisplay, display_for_state, display_for_error

__all__ = [
    "AudioStats",
    "AudioBlob",
    "AUDIO_MIME_TYPE",
    "AUDIO_FILENAME",
    "AudioEvent",
    "SessionEvent",
    "SessionState",
    "RecordingSession",
    # Transcription results
    "TextResult",
    "AcknowledgedAsync",
    "ErrorResult",
    "TranscriptionResult",
    "ASYNC_ACK_EXPLANATION",
    # Display
    "StatusDisplay",
    "display_for_state",
    "display_for_error",
]
