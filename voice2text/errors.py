"""Error codes, user-facing messages and the exception hierarchy."""

from typing import Optional

CAPTURE_ERROR = "CAPTURE_ERROR"
CONFIG_ERROR = "CONFIG_ERROR"
NETWORK_ERROR = "NETWORK_ERROR"
RESPONSE_FORMAT_ERROR = "RESPONSE_FORMAT_ERROR"
INVALID_STATE = "INVALID_STATE"
RELAY_BAD_REQUEST = "RELAY_BAD_REQUEST"
RELAY_UPSTREAM_FAILURE = "RELAY_UPSTREAM_FAILURE"

ERROR_MESSAGES = {
    CAPTURE_ERROR: "Could not access the microphone. Make sure recording permission is granted.",
    CONFIG_ERROR: "Please enter a valid webhook URL.",
    NETWORK_ERROR: "Connection failed",
    RESPONSE_FORMAT_ERROR: 'Response format invalid (missing "text" field)',
    INVALID_STATE: "This action is not available right now.",
    RELAY_BAD_REQUEST: "Target URL required",
    RELAY_UPSTREAM_FAILURE: "Bad Gateway",
}


class Voice2TextError(Exception):
    """Base class for every error the application renders or returns."""

    code = "VOICE2TEXT_ERROR"

    def __init__(self, message: Optional[str] = None):
        self.message = message or ERROR_MESSAGES.get(self.code, self.code)
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        return self.message


class CaptureError(Voice2TextError):
    """Audio device unavailable or permission denied."""
    code = CAPTURE_ERROR


class ConfigError(Voice2TextError):
    """Missing or placeholder webhook target; raised before any network call."""
    code = CONFIG_ERROR


class NetworkError(Voice2TextError):
    """Transport failure or non-success status reaching the target or the relay."""
    code = NETWORK_ERROR

    @property
    def user_message(self) -> str:
        return f"{ERROR_MESSAGES[NETWORK_ERROR]}: {self.message}"


class ResponseFormatError(Voice2TextError):
    """The upstream replied, but not in a shape we understand."""
    code = RESPONSE_FORMAT_ERROR


class InvalidStateError(Voice2TextError):
    """A session operation was called from the wrong state."""
    code = INVALID_STATE


class RelayError(Voice2TextError):
    """Errors the relay turns into JSON responses."""
    status = 500


class RelayBadRequest(RelayError):
    code = RELAY_BAD_REQUEST
    status = 400


class RelayUpstreamFailure(RelayError):
    code = RELAY_UPSTREAM_FAILURE
    status = 502

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"{ERROR_MESSAGES[RELAY_UPSTREAM_FAILURE]}: {reason}")
