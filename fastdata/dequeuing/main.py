"""Lambda handler for the SQS anomalies dequeuing function (fn-sqs-dequeuing-anomalies)."""

import asyncio
from typing import Any

import structlog

from ..config import Settings, settings
from ..domain import parse_sqs_event
from ..domain.ports import MessageSink
from ..infrastructure.adapters import FirehoseMessageSink
from ..infrastructure.logging import Timer, configure_logging, invocation_context
from .processor import QueueMessageProcessor

configure_logging(settings.service_name, settings.log_level)

logger = structlog.get_logger()


def create_sink(config: Settings) -> MessageSink | None:
    """Create the Firehose sink, or None when no delivery stream is configured."""
    if not config.firehose_stream_name:
        return None
    return FirehoseMessageSink(
        delivery_stream_name=config.firehose_stream_name,
        region=config.aws_region,
        endpoint_url=config.aws_endpoint_url,
    )


def handler(event: dict, context: Any) -> dict:
    """AWS Lambda handler for SQS event source."""
    messages = parse_sqs_event(event)

    # Composition Root
    processor = QueueMessageProcessor(
        sink=create_sink(settings),
        ack_policy=settings.ack_policy,
    )

    with invocation_context(context):
        with Timer() as t:
            result = asyncio.run(processor.process_batch(messages))

        logger.info(
            "Queue batch processed",
            messages=result.processed,
            redelivery_requested=len(result.failed_ids),
            duration_ms=t.duration_ms,
        )

    return result.to_response()
