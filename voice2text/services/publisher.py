"""Session event publisher for pub/sub notifications to the UI."""

import logging
from typing import Callable
from pubsub import pub
from ..models.events import SessionEvent

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TOPIC = "session_events"


class SessionPublisher:
    """Publishes session lifecycle events using pubsub.pub."""

    def __init__(self, topic: str = DEFAULT_SESSION_TOPIC):
        """Initialize session publisher.

        Args:
            topic: Pub/sub topic name for session events
        """
        self.topic = topic
        logger.info(f"SessionPublisher initialized with topic: {topic}")

    def publish(self, event: SessionEvent) -> None:
        """Publish a session event to the pub/sub topic.

        Args:
            event: SessionEvent to publish
        """
        pub.sendMessage(self.topic, event=event)
        logger.debug(f"Published session event: {event.event_type} {event.metadata}")

    def subscribe(self, listener: Callable[[SessionEvent], None]) -> None:
        """Register a listener. pubsub keeps only a weak reference to it."""
        pub.subscribe(listener, self.topic)

    def unsubscribe(self, listener: Callable[[SessionEvent], None]) -> None:
        pub.unsubscribe(listener, self.topic)
