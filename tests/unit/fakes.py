"""Event builders and fake ports shared by the unit tests."""

import base64

from fastdata.domain.ports import MessageSink, NotificationPublisher, PublishResult


def make_kinesis_event(*payloads: bytes, partition_key: str = "device-1") -> dict:
    """Build a Kinesis Lambda event with one record per payload."""
    return {
        "Records": [
            {
                "eventID": f"shardId-000000000000:{i:056d}",
                "eventSource": "aws:kinesis",
                "kinesis": {
                    "kinesisSchemaVersion": "1.0",
                    "partitionKey": partition_key,
                    "sequenceNumber": f"{i:056d}",
                    "data": base64.b64encode(payload).decode("ascii"),
                    "approximateArrivalTimestamp": 1700000000.0 + i,
                },
            }
            for i, payload in enumerate(payloads)
        ]
    }


def make_sqs_event(*bodies: str) -> dict:
    """Build an SQS Lambda event with one message per body."""
    return {
        "Records": [
            {
                "messageId": f"msg-{i}",
                "receiptHandle": f"handle-{i}",
                "body": body,
                "attributes": {"ApproximateReceiveCount": "1"},
                "messageAttributes": {},
                "eventSource": "aws:sqs",
                "eventSourceARN": "arn:aws:sqs:us-east-1:123456789012:fastdata-anomalies-main-queue",
            }
            for i, body in enumerate(bodies)
        ]
    }


class FakePublisher(NotificationPublisher):
    """Records every payload; fails for payloads listed in fail_on."""

    def __init__(self, fail_on: set[bytes] | None = None) -> None:
        self.published: list[tuple[bytes, str | None]] = []
        self._fail_on = fail_on or set()

    async def publish(self, payload: bytes, *, group_key: str | None = None) -> PublishResult:
        self.published.append((payload, group_key))
        if payload in self._fail_on:
            return PublishResult(success=False, error="topic unavailable")
        return PublishResult(success=True, message_id=f"sns-{len(self.published)}")


class FakeSink(MessageSink):
    """Records every body; fails for bodies listed in fail_on."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.delivered: list[str] = []
        self._fail_on = fail_on or set()

    async def deliver(self, body: str) -> PublishResult:
        self.delivered.append(body)
        if body in self._fail_on:
            return PublishResult(success=False, error="throttled")
        return PublishResult(success=True, message_id=f"fh-{len(self.delivered)}")


