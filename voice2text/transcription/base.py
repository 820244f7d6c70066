"""Abstract base classes for transcription backends."""

from abc import ABC, abstractmethod
import logging

from ..models.audio import AudioBlob
from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)


class AbstractTranscriptionBackend(ABC):
    """Abstract base class for transcription backends."""

    @abstractmethod
    async def transcribe(self, blob: AudioBlob, target_url: str) -> TranscriptionResult:
        """Send a finished recording to ``target_url`` and interpret the reply.

        Args:
            blob: The recording to submit
            target_url: Where the recording should end up

        Returns:
            A TextResult or AcknowledgedAsync

        Raises:
            Voice2TextError: on configuration, network or response-format failure
        """
        pass
