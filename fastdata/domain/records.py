"""
Domain records delivered to the handlers by Lambda event sources.

Payloads are opaque: nothing here parses or validates their content.
Envelope fields that are missing or malformed fall back to empty values
so that a batch is never rejected because of its shape.
"""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any


def _as_dict(value: Any) -> dict[str, Any]:
    """Envelope sections that are not objects are treated as empty."""
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class StreamRecord:
    """One Kinesis record, already base64-decoded."""

    data: bytes
    sequence_number: str = ""
    partition_key: str = ""
    event_id: str = ""
    approximate_arrival: float | None = None
    decoded: bool = True  # False when the payload was not valid base64

    @classmethod
    def from_event_record(cls, raw: Any) -> "StreamRecord":
        """Build a record from one entry of a Kinesis event's Records list."""
        raw = _as_dict(raw)
        kinesis = _as_dict(raw.get("kinesis"))
        encoded = kinesis.get("data") or ""

        try:
            data = base64.b64decode(encoded, validate=True)
            decoded = True
        except (binascii.Error, ValueError, TypeError):
            # Keep the undecodable text so the record still reaches the log
            data = str(encoded).encode("utf-8")
            decoded = False

        return cls(
            data=data,
            sequence_number=kinesis.get("sequenceNumber", ""),
            partition_key=kinesis.get("partitionKey", ""),
            event_id=raw.get("eventID", ""),
            approximate_arrival=kinesis.get("approximateArrivalTimestamp"),
            decoded=decoded,
        )


@dataclass(frozen=True)
class QueueMessage:
    """One SQS message. Metadata is carried along but never inspected."""

    body: str
    message_id: str = ""
    receipt_handle: str = ""
    event_source_arn: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)
    message_attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_event_record(cls, raw: Any) -> "QueueMessage":
        """Build a message from one entry of an SQS event's Records list."""
        raw = _as_dict(raw)
        body = raw.get("body")
        return cls(
            body="" if body is None else str(body),
            message_id=raw.get("messageId", ""),
            receipt_handle=raw.get("receiptHandle", ""),
            event_source_arn=raw.get("eventSourceARN", ""),
            attributes=_as_dict(raw.get("attributes")),
            message_attributes=_as_dict(raw.get("messageAttributes")),
        )


@dataclass
class BatchResult:
    """Outcome of processing one batch."""

    processed: int = 0
    failed_ids: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed_ids

    def to_response(self) -> dict[str, Any]:
        """Lambda partial batch response consumed by the event source mapping."""
        return {
            "batchItemFailures": [{"itemIdentifier": item_id} for item_id in self.failed_ids],
            "processedRecords": self.processed,
        }


def parse_kinesis_event(event: dict[str, Any]) -> list[StreamRecord]:
    """Turn a Kinesis Lambda event into records, preserving arrival order."""
    return [StreamRecord.from_event_record(raw) for raw in event.get("Records") or []]


def parse_sqs_event(event: dict[str, Any]) -> list[QueueMessage]:
    """Turn an SQS Lambda event into messages, preserving arrival order."""
    return [QueueMessage.from_event_record(raw) for raw in event.get("Records") or []]
