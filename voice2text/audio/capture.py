"""Audio capture module: microphone input delivered as a stream of chunk events."""

import pyaudio
import time
import logging
from threading import Thread, Event
from typing import Optional, Callable
from datetime import datetime
import numpy as np

from ..errors import CaptureError
from ..models.audio import AudioStats
from ..models.events import AudioEvent


logger = logging.getLogger(__name__)


def peak_level(audio_chunk: bytes) -> float:
    """Peak amplitude of a 16-bit PCM chunk, scaled to 0.0 - 1.0."""
    if len(audio_chunk) < 2:
        return 0.0
    samples = np.frombuffer(audio_chunk[:len(audio_chunk) - len(audio_chunk) % 2], dtype=np.int16)
    return float(np.abs(samples.astype(np.int32)).max()) / 32768.0


def check_microphone_available() -> bool:
    """Check whether the host exposes a default audio input device."""
    instance = pyaudio.PyAudio()
    try:
        instance.get_default_input_device_info()
        return True
    except (OSError, IOError) as e:
        logger.debug(f"Microphone not available: {e}")
        return False
    finally:
        instance.terminate()


class AudioCapture:
    """Microphone capture that hands every chunk to a callback.

    The input stream is opened in ``start_recording`` so a missing device or a
    denied permission surfaces immediately as ``CaptureError``. The stream and
    the PyAudio instance are always released by ``stop_recording``.
    """

    def __init__(
        self,
        callback: Callable[[AudioEvent], None],
        sample_rate: int = 16000,
        chunk_size: int = 1024,
        channels: int = 1,
        format: int = pyaudio.paInt16,
    ):
        """Initialize audio capture with specified parameters.

        Args:
            callback: Receives one AudioEvent per captured chunk, in capture order
            sample_rate: Audio sample rate in Hz
            chunk_size: Size of each audio chunk in samples
            channels: Number of audio channels (1 for mono)
            format: Audio format (16-bit signed int)
        """
        self.audio_event_callback = callback
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.format = format

        # Recording thread management
        self.recording_thread: Optional[Thread] = None
        self.stop_event = Event()
        self.is_recording = False

        # Statistics tracking
        self.start_time: Optional[datetime] = None
        self.total_chunks = 0
        self.peak_level = 0.0

        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None
        self.stream: Optional[pyaudio.Stream] = None

    def start_recording(self) -> None:
        """Open the input device and start reading it in a background thread."""
        if self.is_recording:
            logger.warning("Recording already in progress")
            return

        logger.info("Starting audio recording")
        try:
            self.stream = self._open_audio_stream()
        except (OSError, IOError) as e:
            logger.error(f"Could not open audio input: {e}")
            self._release_stream()
            raise CaptureError() from e

        self.stop_event.clear()
        self.start_time = datetime.now()
        self.total_chunks = 0

        self.recording_thread = Thread(target=self._record_continuously, daemon=True)
        self.recording_thread.name = "AudioCaptureThread"
        self.is_recording = True
        self.recording_thread.start()

    def stop_recording(self) -> None:
        """Stop recording and release the input device."""
        if not self.is_recording:
            logger.debug("No recording in progress")
            self._release_stream()
            return

        logger.info("Stopping audio recording")
        self.stop_event.set()

        try:
            if self.recording_thread and self.recording_thread.is_alive():
                self.recording_thread.join(timeout=2.0)
                if self.recording_thread.is_alive():
                    logger.warning("Recording thread did not stop cleanly")
        finally:
            self._release_stream()
            self.is_recording = False
        logger.info(f"Recording stopped. Total chunks: {self.total_chunks}")

    def _open_audio_stream(self) -> pyaudio.Stream:
        self.pyaudio_instance = pyaudio.PyAudio()
        stream = self.pyaudio_instance.open(
            format=self.format,
            channels=self.channels,
            rate=self.sample_rate,
            input=True,
            frames_per_buffer=self.chunk_size,
            stream_callback=None
        )
        logger.info(f"Audio stream opened: {self.sample_rate}Hz, "
                    f"{self.chunk_size} samples/chunk")
        return stream

    def _release_stream(self) -> None:
        stream, self.stream = self.stream, None
        try:
            if stream is not None:
                stream.stop_stream()
                stream.close()
        finally:
            if self.pyaudio_instance is not None:
                self.pyaudio_instance.terminate()
                self.pyaudio_instance = None

    def _publish_audio_event(self, audio_chunk: bytes, final: bool = False) -> None:
        self.total_chunks += 1
        level = peak_level(audio_chunk)
        self.peak_level = level
        audio_event = AudioEvent(
            chunk_id=f"chunk_{self.total_chunks}",
            audio_data=audio_chunk,
            timestamp=time.time(),
            sequence_number=self.total_chunks,
            sample_rate=self.sample_rate,
            channels=self.channels,
            peak_level=level,
            final=final,
        )
        self.audio_event_callback(audio_event)

    def _record_continuously(self) -> None:
        """Internal method: read loop running on the capture thread."""
        stream = self.stream
        try:
            while not self.stop_event.is_set():
                audio_chunk = stream.read(self.chunk_size, exception_on_overflow=False)
                self._publish_audio_event(audio_chunk, final=self.stop_event.is_set())
        except (OSError, IOError) as e:
            logger.error(f"Audio read failed: {e}")

    def get_recording_stats(self) -> AudioStats:
        """Get current recording statistics."""
        duration = 0.0
        if self.start_time:
            duration = (datetime.now() - self.start_time).total_seconds()

        return AudioStats(
            is_recording=self.is_recording,
            duration_seconds=duration,
            sample_rate=self.sample_rate,
            chunk_size=self.chunk_size,
            total_chunks=self.total_chunks,
            peak_level=self.peak_level,
        )

    def __del__(self):
        """Ensure resources are cleaned up on deletion."""
        if self.is_recording:
            self.stop_recording()
