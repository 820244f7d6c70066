"""Audio capture module."""

from .capture import AudioCapture, check_microphone_available, peak_level

__all__ = [
    'AudioCapture',
    'check_microphone_available',
    'peak_level',
]
