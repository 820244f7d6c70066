"""Voice2Text: record speech, transcribe it through a webhook, relay local webhook calls."""

__version__ = "0.1.0"
