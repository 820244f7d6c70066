"""Transcription module for Voice2Text."""

from .base import AbstractTranscriptionBackend
from .interpreter import WebhookReply, interpret_reply, parse_reply_body
from .webhook_backend import (
    WebhookTranscriptionBackend,
    build_request_url,
    is_loopback_target,
    validate_target,
    DEMO_TRANSCRIPT,
)

__all__ = [
    "AbstractTranscriptionBackend",
    "WebhookReply",
    "interpret_reply",
    "parse_reply_body",
    "WebhookTranscriptionBackend",
    "build_request_url",
    "is_loopback_target",
    "validate_target",
    "DEMO_TRANSCRIPT",
]
