"""Pytest configuration and fixtures for Voice2Text tests."""

import pytest
import tempfile
import time
import uuid
import logging
from pathlib import Path
from unittest.mock import Mock, patch
import numpy as np

from voice2text.config import Voice2TextConfig
from voice2text.errors import CaptureError
from voice2text.models.events import AudioEvent
from voice2text.services.publisher import SessionPublisher


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class FakeCapture:
    """Stands in for AudioCapture: records calls and lets tests emit chunks."""

    def __init__(self, callback, fail_on_start=False, fail_on_stop=False):
        self.callback = callback
        self.fail_on_start = fail_on_start
        self.fail_on_stop = fail_on_stop
        self.is_recording = False
        self.start_calls = 0
        self.stop_calls = 0
        self.sequence = 0

    def start_recording(self):
        self.start_calls += 1
        if self.fail_on_start:
            raise CaptureError()
        self.is_recording = True

    def stop_recording(self):
        self.stop_calls += 1
        self.is_recording = False
        if self.fail_on_stop:
            raise OSError("device vanished")

    @property
    def released(self):
        return self.stop_calls > 0 and not self.is_recording

    def emit(self, data: bytes):
        self.sequence += 1
        self.callback(AudioEvent(
            chunk_id=f"chunk_{self.sequence}",
            audio_data=data,
            timestamp=time.time(),
            sequence_number=self.sequence,
        ))


@pytest.fixture
def capture_factory():
    """Factory building FakeCapture devices; created devices are kept on ``.created``."""
    created = []

    def factory(callback, **overrides):
        capture = FakeCapture(callback, **{**factory.options, **overrides})
        created.append(capture)
        return capture

    factory.created = created
    factory.options = {}
    return factory


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def sample_audio_chunk():
    """Generate a sample audio chunk for testing."""
    # 1024 samples of 16-bit audio (sine wave)
    sample_rate = 16000
    duration = 1024 / sample_rate
    freq = 440  # A4 note

    t = np.linspace(0, duration, 1024, False)
    wave_data = np.sin(2 * np.pi * freq * t)

    audio_data = (wave_data * 32767).astype(np.int16)
    return audio_data.tobytes()


@pytest.fixture
def test_config(temp_data_dir):
    """Configuration with a temporary web root and no demo delay."""
    web_root = Path(temp_data_dir) / "web"
    web_root.mkdir()
    return Voice2TextConfig.from_dict({
        "relay": {"web_root": str(web_root)},
        "client": {
            "webhook_url": "http://127.0.0.1:5678/webhook/voice",
            "demo_delay_seconds": 0.0,
        },
        "logging": {"file_path": str(Path(temp_data_dir) / "logs" / "voice2text.log")},
    })


@pytest.fixture
def web_root(test_config):
    """Populate the configured web root with a few assets."""
    root = test_config.get_web_root()
    (root / "index.html").write_text("<h1>Voice2Text</h1>", encoding="utf-8")
    (root / "app.js").write_text("console.log('ready');", encoding="utf-8")
    (root / "style.css").write_text("body { margin: 0; }", encoding="utf-8")
    (root / "clip.webm").write_bytes(b"\x1a\x45\xdf\xa3")
    (root / "assets").mkdir()
    (root / "assets" / "icon.svg").write_text("<svg/>", encoding="utf-8")
    return root


@pytest.fixture
def publisher():
    """Publisher on a topic unique to the test."""
    return SessionPublisher(topic=f"test_{uuid.uuid4().hex}")


@pytest.fixture
def published_events(publisher):
    """Collect every SessionEvent sent on the test topic."""
    events = []

    def listener(event):
        events.append(event)

    publisher.subscribe(listener)
    yield events
    publisher.unsubscribe(listener)


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware."""
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        # Configure mock stream
        mock_stream.read.return_value = b'\x00' * 2048  # Silent audio
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        # Configure mock PyAudio instance
        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None
        mock_pyaudio_instance.get_sample_size.return_value = 2

        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }
