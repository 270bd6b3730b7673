"""
Outbound port for forwarding stream records to a notification topic.

Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class PublishResult:
    """Result of a single publish or delivery attempt."""

    success: bool
    message_id: str | None = None
    error: str | None = None


class NotificationPublisher(ABC):
    """
    Outbound port for the fan-out topic.

    Keeps the queuing loop independent of the transport so it can be
    exercised with a fake publisher.
    """

    @abstractmethod
    async def publish(self, payload: bytes, *, group_key: str | None = None) -> PublishResult:
        """
        Publish one record payload.

        Args:
            payload: Raw record bytes
            group_key: Ordering key (the Kinesis partition key), used by FIFO topics

        Returns:
            PublishResult describing the attempt
        """
        ...
