"""Terminal user interface for Voice2Text."""

from .terminal_client import TerminalClient

__all__ = ["TerminalClient"]
