"""Audio-related data models."""

import io
import wave
from dataclasses import dataclass
from typing import Iterable

AUDIO_MIME_TYPE = "audio/wav"
AUDIO_FILENAME = "recording.wav"
SAMPLE_WIDTH_BYTES = 2  # 16-bit PCM


@dataclass
class AudioStats:
    """Audio recording statistics."""
    is_recording: bool
    duration_seconds: float
    sample_rate: int
    chunk_size: int
    total_chunks: int
    peak_level: float = 0.0


@dataclass(frozen=True)
class AudioBlob:
    """A finished recording, wrapped in the fixed WAV container."""
    data: bytes
    sample_rate: int
    channels: int
    total_chunks: int
    mime_type: str = AUDIO_MIME_TYPE
    filename: str = AUDIO_FILENAME

    @classmethod
    def from_chunks(cls, chunks: Iterable[bytes], sample_rate: int = 16000, channels: int = 1) -> "AudioBlob":
        """Write PCM chunks, in the order given, as frames of one WAV file."""
        buffer = io.BytesIO()
        total = 0
        with wave.open(buffer, 'wb') as wf:
            wf.setnchannels(channels)
            wf.setsampwidth(SAMPLE_WIDTH_BYTES)
            wf.setframerate(sample_rate)
            for chunk in chunks:
                wf.writeframes(chunk)
                total += 1
        return cls(
            data=buffer.getvalue(),
            sample_rate=sample_rate,
            channels=channels,
            total_chunks=total,
        )

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def pcm_bytes(self) -> bytes:
        """Raw PCM frames stored in the container."""
        with wave.open(io.BytesIO(self.data), 'rb') as wf:
            return wf.readframes(wf.getnframes())

    @property
    def duration_seconds(self) -> float:
        bytes_per_second = self.sample_rate * self.channels * SAMPLE_WIDTH_BYTES
        return len(self.pcm_bytes) / bytes_per_second if bytes_per_second else 0.0
