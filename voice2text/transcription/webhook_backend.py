"""Webhook transcription backend: uploads a recording and reads back the transcript."""

import asyncio
import logging
from typing import Iterable, Optional, Tuple
from urllib.parse import urlencode, urlsplit

import aiohttp

from .base import AbstractTranscriptionBackend
from .interpreter import DEFAULT_ASYNC_ACK_MESSAGE, interpret_reply, parse_reply_body
from ..config import Voice2TextConfig
from ..errors import ConfigError, NetworkError
from ..models.audio import AudioBlob
from ..models.transcription import TextResult, TranscriptionResult

logger = logging.getLogger(__name__)

LOOPBACK_HOSTS = ("localhost", "127.0.0.1")
PLACEHOLDER_MARKER = "example.com"
DEFAULT_DEMO_MARKERS = ("example.com", "your-n8n-instance")
DEFAULT_RELAY_URL = "http://localhost:3000"
PROXY_PATH = "/proxy"

DEMO_TRANSCRIPT = (
    "This is a demo transcript.\n"
    "The recording was accepted, but no real webhook URL is configured, "
    "so this is an automatic reply showing how the app works.\n\n"
    "This is a demo response."
)


def validate_target(target_url: Optional[str]) -> str:
    """Return the trimmed target.

    Raises:
        ConfigError: the target is unset, still the placeholder, or not an
            absolute http(s) URL (e.g. ``localhost:5678/webhook``)
    """
    target = (target_url or "").strip()
    if not target or PLACEHOLDER_MARKER in target:
        raise ConfigError()
    try:
        parts = urlsplit(target)
    except ValueError as e:
        raise ConfigError() from e
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        raise ConfigError()
    return target


def is_loopback_target(target_url: str) -> bool:
    """True when the target host is this machine (localhost / 127.0.0.1)."""
    try:
        host = urlsplit(target_url).hostname
    except ValueError:
        return False
    return host in LOOPBACK_HOSTS


def build_request_url(target_url: str, relay_url: str = DEFAULT_RELAY_URL) -> Tuple[str, bool]:
    """Pick where to POST: the relay for loopback targets, the target itself otherwise.

    Returns:
        (request URL, whether the relay is used)
    """
    if is_loopback_target(target_url):
        query = urlencode({"url": target_url})
        return f"{relay_url.rstrip('/')}{PROXY_PATH}?{query}", True
    return target_url, False


class WebhookTranscriptionBackend(AbstractTranscriptionBackend):
    """Sends recordings to a workflow webhook as multipart form data."""

    def __init__(
        self,
        relay_url: str = DEFAULT_RELAY_URL,
        field_name: str = "file",
        async_ack_message: str = DEFAULT_ASYNC_ACK_MESSAGE,
        demo_markers: Iterable[str] = DEFAULT_DEMO_MARKERS,
        demo_delay_seconds: float = 2.0,
    ):
        """Initialize the webhook backend.

        Args:
            relay_url: Base URL of the relay used for loopback targets
            field_name: Multipart field carrying the audio file
            async_ack_message: ``message`` value meaning "workflow started, no transcript"
            demo_markers: Target substrings that turn network failures into a demo transcript
            demo_delay_seconds: Simulated processing time before the demo transcript
        """
        self.relay_url = relay_url
        self.field_name = field_name
        self.async_ack_message = async_ack_message
        self.demo_markers = tuple(demo_markers)
        self.demo_delay_seconds = demo_delay_seconds

        logger.info(f"WebhookTranscriptionBackend initialized (relay: {relay_url})")

    @classmethod
    def from_config(cls, config: Voice2TextConfig) -> "WebhookTranscriptionBackend":
        return cls(
            relay_url=config.get('client.relay_url', DEFAULT_RELAY_URL),
            field_name=config.get('client.field_name', 'file'),
            async_ack_message=config.get('client.async_ack_message', DEFAULT_ASYNC_ACK_MESSAGE),
            demo_markers=config.get('client.demo_markers', DEFAULT_DEMO_MARKERS),
            demo_delay_seconds=float(config.get('client.demo_delay_seconds', 2.0)),
        )

    def is_demo_target(self, target_url: str) -> bool:
        return any(marker in target_url for marker in self.demo_markers)

    async def transcribe(self, blob: AudioBlob, target_url: str) -> TranscriptionResult:
        target = validate_target(target_url)

        try:
            return await self._submit(blob, target)
        except NetworkError as e:
            if not self.is_demo_target(target):
                raise
            logger.info(f"Upload to demo target failed ({e.message}), simulating a response")
            await asyncio.sleep(self.demo_delay_seconds)
            return TextResult(text=DEMO_TRANSCRIPT, demo=True)

    async def _submit(self, blob: AudioBlob, target_url: str) -> TranscriptionResult:
        request_url, via_relay = build_request_url(target_url, self.relay_url)

        logger.debug(f"Audio blob size: {blob.size} bytes, type: {blob.mime_type}")
        logger.info(f"[Upload] Sending to: {request_url} (proxy: {via_relay})")

        form = aiohttp.FormData()
        form.add_field(self.field_name, blob.data, filename=blob.filename, content_type=blob.mime_type)

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(request_url, data=form) as response:
                    raw = await response.read()
                    body = raw.decode("utf-8", errors="replace")
                    if not 200 <= response.status < 300:
                        raise NetworkError(f"HTTP Error {response.status}: {body[:100]}")
                    content_type = response.headers.get("Content-Type")
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.error(f"Upload failed: {e}")
            raise NetworkError(str(e) or e.__class__.__name__) from e

        logger.debug(f"Webhook response ({content_type}): {body[:500]}")
        data = parse_reply_body(body, content_type)
        return interpret_reply(data, self.async_ack_message)
