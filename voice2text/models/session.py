"""Recording session state machine."""

import logging
import threading
import uuid
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Protocol

from .audio import AudioBlob
from .events import AudioEvent
from ..errors import CaptureError, InvalidStateError

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    PROCESSING = "processing"


class CaptureDevice(Protocol):
    """Anything that can start, stop and release an audio input."""

    def start_recording(self) -> None: ...

    def stop_recording(self) -> None: ...


CaptureFactory = Callable[[Callable[[AudioEvent], None]], CaptureDevice]


class RecordingSession:
    """One capture-to-submission lifecycle.

    The session builds its capture device with its own ``append_chunk`` as the
    chunk callback and owns that device until ``stop()``. Chunks are appended
    from the capture thread, so the chunk list and the state are guarded by a
    lock.
    """

    def __init__(self, capture_factory: CaptureFactory, sample_rate: int = 16000, channels: int = 1):
        self.session_id = uuid.uuid4().hex[:12]
        self.sample_rate = sample_rate
        self.channels = channels
        self.state = SessionState.IDLE
        self.chunks: List[bytes] = []
        self.start_time: Optional[datetime] = None
        self.peak_level = 0.0
        self._lock = threading.Lock()
        self.capture: Optional[CaptureDevice] = capture_factory(self.append_chunk)

    def start(self) -> None:
        """Idle -> Recording. Raises CaptureError if the device cannot be opened."""
        if self.state != SessionState.IDLE:
            raise InvalidStateError(f"Cannot start a session in state {self.state.value}")
        if self.capture is None:
            raise CaptureError("Capture device already released")

        with self._lock:
            self.chunks = []
            self.start_time = datetime.now()
            self.state = SessionState.RECORDING

        try:
            self.capture.start_recording()
        except Exception as e:
            with self._lock:
                self.state = SessionState.IDLE
            self._release()
            if isinstance(e, CaptureError):
                raise
            raise CaptureError() from e
        logger.info(f"Session {self.session_id} recording")

    def append_chunk(self, event: AudioEvent) -> None:
        """Capture callback: append a fragment while recording."""
        if not event.audio_data:
            return
        with self._lock:
            if self.state != SessionState.RECORDING:
                logger.debug(f"Dropping {event.chunk_id}: session is {self.state.value}")
                return
            self.chunks.append(event.audio_data)
            self.peak_level = event.peak_level

    def stop(self) -> AudioBlob:
        """Recording -> Processing. Releases the device and returns the recording."""
        if self.state != SessionState.RECORDING:
            raise InvalidStateError(f"Cannot stop a session in state {self.state.value}")

        try:
            self._release()
        except OSError as e:
            logger.error(f"Session {self.session_id} could not release the audio input: {e}")
            raise CaptureError(f"Recording stopped, but the microphone could not be released: {e}") from e
        finally:
            with self._lock:
                self.state = SessionState.PROCESSING
                chunks = list(self.chunks)

        blob = AudioBlob.from_chunks(chunks, sample_rate=self.sample_rate, channels=self.channels)
        logger.info(f"Session {self.session_id} stopped: {blob.total_chunks} chunks, {blob.size} bytes")
        return blob

    def finish(self) -> None:
        """Processing -> Idle."""
        if self.state != SessionState.PROCESSING:
            raise InvalidStateError(f"Cannot finish a session in state {self.state.value}")
        with self._lock:
            self.state = SessionState.IDLE

    @property
    def is_active(self) -> bool:
        return self.state != SessionState.IDLE

    @property
    def duration_seconds(self) -> float:
        if not self.start_time:
            return 0.0
        return (datetime.now() - self.start_time).total_seconds()

    def _release(self) -> None:
        capture, self.capture = self.capture, None
        if capture is not None:
            capture.stop_recording()
