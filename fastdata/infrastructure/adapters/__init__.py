from .firehose_sink import FirehoseMessageSink
from .sns_publisher import SnsNotificationPublisher

__all__ = [
    "FirehoseMessageSink",
    "SnsNotificationPublisher",
]
