"""Sample publisher for pub/sub delivery of raw sensor values."""

import logging
from typing import Callable
from pubsub import pub

logger = logging.getLogger(__name__)


class SamplePublisher:
    """Publishes raw sensor values using pubsub.pub.

    A sensor link adapter calls ``publish_value`` from its delivery callback;
    subscribers receive the value as the ``value`` message argument.
    """

    def __init__(self, topic: str = "emg.sample"):
        """Initialize sample publisher.

        Args:
            topic: Pub/sub topic name for raw samples
        """
        self.topic = topic
        logger.info(f"SamplePublisher initialized with topic: {topic}")

    def publish_value(self, value: float) -> None:
        """Publish one raw sensor value to the pub/sub topic."""
        pub.sendMessage(self.topic, value=value)

    def get_callback(self) -> Callable[[float], None]:
        """Get callback function for a sensor link to deliver values through."""
        return self.publish_value
