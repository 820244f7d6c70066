"""UI-related data models."""

from dataclasses import dataclass

from .session import SessionState

MIC_ICON = "🎙"
STOP_ICON = "⏹"


@dataclass(frozen=True)
class StatusDisplay:
    """What the front end shows for a given session state."""
    label: str
    style: str
    button_icon: str = MIC_ICON
    button_enabled: bool = True


_STATE_DISPLAY = {
    SessionState.IDLE: StatusDisplay(
        label="Ready to record",
        style="ready",
    ),
    SessionState.RECORDING: StatusDisplay(
        label="Recording... (press Enter to stop)",
        style="recording",
        button_icon=STOP_ICON,
    ),
    SessionState.PROCESSING: StatusDisplay(
        label="Processing and transcribing...",
        style="processing",
        button_enabled=False,
    ),
}


def display_for_state(state: SessionState) -> StatusDisplay:
    """Map a session state to its display attributes. Pure function."""
    return _STATE_DISPLAY[SessionState(state)]


def display_for_error(message: str) -> StatusDisplay:
    return StatusDisplay(label=message, style="error")
