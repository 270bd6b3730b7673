from .message_sink import MessageSink
from .notification_publisher import NotificationPublisher, PublishResult

__all__ = [
    "MessageSink",
    "NotificationPublisher",
    "PublishResult",
]
