"""Turn a webhook reply body into a transcription result."""

import json
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import ResponseFormatError
from ..models.transcription import AcknowledgedAsync, TextResult, TranscriptionResult

logger = logging.getLogger(__name__)

DEFAULT_ASYNC_ACK_MESSAGE = "Workflow was started"


class WebhookReply(BaseModel):
    """The fields we look at in a webhook reply. Anything else is ignored."""
    model_config = ConfigDict(extra="allow")

    text: Any = None
    message: Any = None


def parse_reply_body(body: str, content_type: Optional[str]) -> Dict[str, Any]:
    """Decode a reply body.

    JSON bodies are parsed when the content type says so; a body that fails to
    parse, or any other content type, becomes ``{"text": body}``.
    """
    if content_type and "application/json" in content_type.lower():
        try:
            return json.loads(body)
        except (json.JSONDecodeError, ValueError):
            logger.debug("Reply declared JSON but did not parse, treating as plain text")
    return {"text": body}


def interpret_reply(data: Any, async_ack_message: str = DEFAULT_ASYNC_ACK_MESSAGE) -> TranscriptionResult:
    """Map decoded reply data to a TextResult or AcknowledgedAsync.

    Raises:
        ResponseFormatError: the reply has neither a transcript nor the
            asynchronous-acceptance marker
    """
    try:
        reply = WebhookReply.model_validate(data)
    except ValidationError as e:
        raise ResponseFormatError() from e

    if reply.text:
        return TextResult(text=str(reply.text))
    if async_ack_message and reply.message == async_ack_message:
        logger.info("Webhook started an asynchronous workflow; no transcript returned")
        return AcknowledgedAsync()
    raise ResponseFormatError()
