"""Terminal front end: Enter toggles recording, results are printed with rich."""

import asyncio
import logging
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..models.events import SessionEvent
from ..models.session import SessionState
from ..models.ui import StatusDisplay, display_for_error, display_for_state
from ..services.recording_service import RecordingService

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    "ready": "bold green",
    "recording": "bold red",
    "processing": "bold yellow",
    "error": "bold red",
}


class TerminalClient:
    """Renders session events and drives the recording service from the keyboard."""

    def __init__(self, service: RecordingService, console: Optional[Console] = None):
        self.service = service
        self.console = console or Console()
        self.status: StatusDisplay = display_for_state(SessionState.IDLE)
        self.transcript = ""
        self.service.publisher.subscribe(self.on_session_event)

    def on_session_event(self, event: SessionEvent) -> None:
        if event.event_type == "state_changed":
            self.status = display_for_state(event.metadata["state"])
            self.render_status()
        elif event.event_type == "result":
            result = event.metadata["result"]
            if result.kind == "error":
                self.status = display_for_error(result.display_text)
                self.render_status()
            else:
                self.transcript = result.display_text
                self.render_transcript(demo=getattr(result, "demo", False))
        elif event.event_type == "error":
            self.status = display_for_error(event.metadata.get("message", ""))
            self.render_status()

    def render_status(self) -> None:
        text = Text(f"{self.status.button_icon}  {self.status.label}", style=STATUS_STYLES.get(self.status.style, ""))
        self.console.print(text)

    def render_transcript(self, demo: bool = False) -> None:
        title = "Transcription (demo)" if demo else "Transcription"
        self.console.print(Panel(self.transcript or "", title=title, border_style="bright_blue"))

    def render_banner(self) -> None:
        target = self.service.target_url or "(not set)"
        self.console.print(Panel(
            Text.assemble(
                ("Voice2Text", "bold blue"), "\n",
                f"Webhook: {target}\n",
                "Enter = start/stop recording, q + Enter = quit",
            ),
            border_style="bright_blue",
        ))

    async def handle_input(self, line: str) -> bool:
        """Act on one line of keyboard input. Returns False to quit."""
        if line.strip().lower() == "q":
            return False
        if self.service.state == SessionState.IDLE:
            self.service.start_recording()
        elif self.service.state == SessionState.RECORDING:
            await self.service.stop_recording()
        return True

    async def run(self) -> None:
        """Read keyboard lines until the user quits."""
        loop = asyncio.get_running_loop()
        self.render_banner()
        self.render_status()
        try:
            while True:
                try:
                    line = await loop.run_in_executor(None, input)
                except EOFError:
                    break
                if not await self.handle_input(line):
                    break
        finally:
            self.service.shutdown()
            self.service.publisher.unsubscribe(self.on_session_event)
            logger.info("Terminal client stopped")
