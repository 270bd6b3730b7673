"""Lambda handler for the Kinesis queuing function (fn-kds-queuing)."""

import asyncio
from typing import Any

import structlog

from ..config import Settings, settings
from ..domain import parse_kinesis_event
from ..domain.ports import NotificationPublisher
from ..infrastructure.adapters import SnsNotificationPublisher
from ..infrastructure.logging import Timer, configure_logging, invocation_context
from .processor import StreamRecordProcessor

configure_logging(settings.service_name, settings.log_level)

logger = structlog.get_logger()


def create_publisher(config: Settings) -> NotificationPublisher | None:
    """Create the SNS publisher, or None when no topic is configured."""
    if not config.sns_topic_arn:
        return None
    return SnsNotificationPublisher(
        topic_arn=config.sns_topic_arn,
        region=config.aws_region,
        endpoint_url=config.aws_endpoint_url,
    )


def handler(event: dict, context: Any) -> None:
    """AWS Lambda handler for Kinesis event source."""
    records = parse_kinesis_event(event)

    # Composition Root
    processor = StreamRecordProcessor(
        publisher=create_publisher(settings),
        failure_mode=settings.publish_failure_mode,
    )

    with invocation_context(context):
        with Timer() as t:
            result = asyncio.run(processor.process_batch(records))

        logger.info(
            "Stream batch processed",
            records=result.processed,
            publish_failures=len(result.failed_ids),
            duration_ms=t.duration_ms,
        )
