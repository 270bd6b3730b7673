"""Lambda handler for the on-error dequeuing function, fed by the anomalies dead-letter queue."""

import asyncio
from typing import Any

import structlog

from ..config import settings
from ..domain import parse_sqs_event
from ..infrastructure.logging import Timer, configure_logging, invocation_context
from .main import create_sink
from .processor import QueueMessageProcessor

configure_logging(settings.service_name, settings.log_level)

logger = structlog.get_logger()

DLQ_SOURCE = "dead_letter_queue"


def handler(event: dict, context: Any) -> dict:
    """AWS Lambda handler for the DLQ event source."""
    messages = parse_sqs_event(event)

    # Composition Root
    processor = QueueMessageProcessor(
        sink=create_sink(settings),
        ack_policy=settings.ack_policy,
    )

    with invocation_context(context), structlog.contextvars.bound_contextvars(source=DLQ_SOURCE):
        with Timer() as t:
            result = asyncio.run(processor.process_batch(messages))

        logger.info(
            "Dead-letter batch processed",
            messages=result.processed,
            redelivery_requested=len(result.failed_ids),
            duration_ms=t.duration_ms,
        )

    return result.to_response()
