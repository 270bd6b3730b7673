from .errors import FastDataError, PublishError
from .records import (
    BatchResult,
    QueueMessage,
    StreamRecord,
    parse_kinesis_event,
    parse_sqs_event,
)

__all__ = [
    "BatchResult",
    "FastDataError",
    "PublishError",
    "QueueMessage",
    "StreamRecord",
    "parse_kinesis_event",
    "parse_sqs_event",
]
