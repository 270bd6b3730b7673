from abc import ABC, abstractmethod

from .notification_publisher import PublishResult


class MessageSink(ABC):
    """Outbound port receiving dequeued message bodies."""

    @abstractmethod
    async def deliver(self, body: str) -> PublishResult:
        """Deliver one message body."""
        ...
