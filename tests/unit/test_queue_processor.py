"""Tests for the dequeuing (SQS) message processor."""

import pytest
from structlog.testing import capture_logs

from fastdata.config import AckPolicy
from fastdata.dequeuing import QueueMessageProcessor
from fastdata.domain import parse_sqs_event
from fastdata.domain.ports import MessageSink, PublishResult
from fakes import FakeSink, make_sqs_event

MESSAGE_EVENT = "Queue message received"


def message_lines(logs: list[dict]) -> list[dict]:
    return [entry for entry in logs if entry["event"] == MESSAGE_EVENT]


class RaisingSink(MessageSink):
    async def deliver(self, body: str) -> PublishResult:
        raise TimeoutError("firehose timed out")


class TestAlwaysAcknowledge:
    """Default policy: the batch is always reported as successful."""

    @pytest.mark.asyncio
    async def test_logs_each_message_in_order(self) -> None:
        messages = parse_sqs_event(make_sqs_event("A", "B", "C"))

        with capture_logs() as logs:
            result = await QueueMessageProcessor().process_batch(messages)

        lines = message_lines(logs)
        assert [line["body"] for line in lines] == ["A", "B", "C"]
        assert [line["message_id"] for line in lines] == ["msg-0", "msg-1", "msg-2"]
        assert result.to_response()["batchItemFailures"] == []

    @pytest.mark.asyncio
    async def test_odd_content_still_succeeds(self) -> None:
        bodies = ["", "{not json", "\x00\u00ff\u2603"]
        messages = parse_sqs_event(make_sqs_event(*bodies))

        with capture_logs() as logs:
            result = await QueueMessageProcessor().process_batch(messages)

        assert [line["body"] for line in message_lines(logs)] == bodies
        assert result.success
        assert result.processed == 3

    @pytest.mark.asyncio
    async def test_empty_batch(self) -> None:
        with capture_logs() as logs:
            result = await QueueMessageProcessor().process_batch([])

        assert logs == []
        assert result.to_response() == {"batchItemFailures": [], "processedRecords": 0}

    @pytest.mark.asyncio
    async def test_sink_failures_are_not_reported(self) -> None:
        sink = FakeSink(fail_on={"B"})
        messages = parse_sqs_event(make_sqs_event("A", "B"))

        result = await QueueMessageProcessor(sink=sink).process_batch(messages)

        assert sink.delivered == ["A", "B"]
        assert result.success

    @pytest.mark.asyncio
    async def test_raising_sink_does_not_fail_batch(self) -> None:
        messages = parse_sqs_event(make_sqs_event("A"))

        result = await QueueMessageProcessor(sink=RaisingSink()).process_batch(messages)

        assert result.success

    @pytest.mark.asyncio
    async def test_same_batch_twice_logs_same_sequence(self) -> None:
        messages = parse_sqs_event(make_sqs_event("x", "y"))
        processor = QueueMessageProcessor()

        with capture_logs() as first:
            await processor.process_batch(messages)
        with capture_logs() as second:
            await processor.process_batch(messages)

        assert message_lines(first) == message_lines(second)


class TestReportFailures:
    @pytest.mark.asyncio
    async def test_failed_deliveries_are_redelivered(self) -> None:
        sink = FakeSink(fail_on={"B"})
        messages = parse_sqs_event(make_sqs_event("A", "B", "C"))
        processor = QueueMessageProcessor(sink=sink, ack_policy=AckPolicy.REPORT_FAILURES)

        result = await processor.process_batch(messages)

        assert sink.delivered == ["A", "B", "C"]
        assert result.to_response()["batchItemFailures"] == [{"itemIdentifier": "msg-1"}]

    @pytest.mark.asyncio
    async def test_raising_sink_is_reported(self) -> None:
        messages = parse_sqs_event(make_sqs_event("A"))
        processor = QueueMessageProcessor(
            sink=RaisingSink(),
            ack_policy=AckPolicy.REPORT_FAILURES,
        )

        result = await processor.process_batch(messages)

        assert result.failed_ids == ["msg-0"]

    @pytest.mark.asyncio
    async def test_without_sink_nothing_can_fail(self) -> None:
        messages = parse_sqs_event(make_sqs_event("A"))
        processor = QueueMessageProcessor(ack_policy=AckPolicy.REPORT_FAILURES)

        result = await processor.process_batch(messages)

        assert result.success
