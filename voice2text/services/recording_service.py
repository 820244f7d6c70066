"""Core service that manages the record -> submit -> render lifecycle."""

import logging
from typing import Optional

from ..config import Voice2TextConfig
from ..errors import CaptureError, Voice2TextError
from ..models.events import SessionEvent
from ..models.session import CaptureFactory, RecordingSession, SessionState
from ..models.transcription import ErrorResult, TranscriptionResult
from ..transcription.base import AbstractTranscriptionBackend
from .publisher import SessionPublisher

logger = logging.getLogger(__name__)


class RecordingService:
    """Owns the client's single recording session and the latest result."""

    def __init__(
        self,
        config: Voice2TextConfig,
        backend: AbstractTranscriptionBackend,
        capture_factory: CaptureFactory,
        publisher: Optional[SessionPublisher] = None,
    ):
        """Initialize recording service.

        Args:
            config: Application configuration
            backend: Where finished recordings are sent
            capture_factory: Builds a capture device around a chunk callback
            publisher: Session event publisher (defaults to the standard topic)
        """
        self.config = config
        self.backend = backend
        self.capture_factory = capture_factory
        self.publisher = publisher or SessionPublisher()
        self.target_url = config.get_webhook_url()

        self.session: Optional[RecordingSession] = None
        self.last_result: Optional[TranscriptionResult] = None

        logger.info("RecordingService ready")

    @property
    def state(self) -> SessionState:
        if self.session is None:
            return SessionState.IDLE
        return self.session.state

    def start_recording(self) -> bool:
        """Start a new session. No-op while one is recording or processing.

        Returns:
            True if recording started
        """
        if self.state != SessionState.IDLE:
            logger.warning(f"Start ignored: session is {self.state.value}")
            return False

        session = RecordingSession(
            self.capture_factory,
            sample_rate=self.config.get('audio.sample_rate', 16000),
            channels=self.config.get('audio.channels', 1),
        )
        try:
            session.start()
        except CaptureError as e:
            logger.error(f"Could not start recording: {e}")
            self.session = None
            self._publish("error", session.session_id, code=e.code, message=e.user_message)
            self._publish_state(session.session_id)
            return False

        self.session = session
        self._publish_state(session.session_id)
        return True

    async def stop_recording(self) -> Optional[TranscriptionResult]:
        """Stop the current session, submit the recording and store the result.

        Returns:
            The result rendered for this session, or None if nothing was recording
        """
        session = self.session
        if session is None or session.state != SessionState.RECORDING:
            logger.warning("Stop ignored: no recording in progress")
            return None

        try:
            try:
                blob = session.stop()
                self._publish_state(session.session_id)
                result = await self.backend.transcribe(blob, self.target_url)
            except Voice2TextError as e:
                logger.error(f"Session {session.session_id} failed: {e}")
                result = ErrorResult(reason=e.user_message, code=e.code)

            # Rendered while still processing; the session goes idle afterwards
            self.last_result = result
            self._publish("result", session.session_id, result=result)
        finally:
            if session.state == SessionState.PROCESSING:
                session.finish()
            self.session = None

        self._publish_state(session.session_id)
        return result

    def shutdown(self) -> None:
        """Release the capture device if a session is still recording."""
        session, self.session = self.session, None
        if session is not None and session.state == SessionState.RECORDING:
            logger.info(f"Discarding session {session.session_id} on shutdown")
            try:
                session.stop()
            except CaptureError as e:
                logger.error(f"Shutdown could not release the capture device: {e}")

    def _publish_state(self, session_id: str) -> None:
        self._publish("state_changed", session_id, state=self.state)

    def _publish(self, event_type: str, session_id: str, **metadata) -> None:
        self.publisher.publish(SessionEvent(event_type=event_type, session_id=session_id, metadata=metadata))
