"""Transcription result models.

A submission ends in exactly one of three results: the transcript text, an
acknowledgement that the webhook started an asynchronous workflow, or an
error. The client keeps only the latest one.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from ..errors import NETWORK_ERROR

ASYNC_ACK_EXPLANATION = (
    "Recording sent successfully!\n\n"
    "The workflow started processing the audio file.\n\n"
    "Note: the webhook is set to respond immediately, so the transcript "
    "is not returned to this client.\n\n"
    "To receive the transcript:\n"
    "1. Open the webhook node settings in your workflow\n"
    "2. Change Response Mode to 'When Last Node Finishes'\n"
    "3. Add a 'Respond to Webhook' node at the end\n"
    '4. Respond with: { "text": "<transcript>" }'
)


@dataclass
class TextResult:
    """The webhook returned a transcript."""
    text: str
    demo: bool = False
    timestamp: datetime = field(default_factory=datetime.now)
    kind: str = field(default="text", init=False)

    @property
    def display_text(self) -> str:
        return self.text


@dataclass
class AcknowledgedAsync:
    """The webhook accepted the upload but will not answer synchronously."""
    message: str = ASYNC_ACK_EXPLANATION
    timestamp: datetime = field(default_factory=datetime.now)
    kind: str = field(default="acknowledged_async", init=False)

    @property
    def display_text(self) -> str:
        return self.message


@dataclass
class ErrorResult:
    """Submission failed; ``reason`` is shown to the user as status text."""
    reason: str
    code: str = NETWORK_ERROR
    timestamp: datetime = field(default_factory=datetime.now)
    kind: str = field(default="error", init=False)

    @property
    def display_text(self) -> str:
        return self.reason


TranscriptionResult = Union[TextResult, AcknowledgedAsync, ErrorResult]
