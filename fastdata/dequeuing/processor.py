"""
Message processor for the anomalies dequeuing handler.

Logs every SQS message of a batch and hands its body to an optional
MessageSink. Whether a failed delivery is reported back to SQS depends
on the configured AckPolicy.
"""

from collections.abc import Sequence

import structlog

from ..config import AckPolicy
from ..domain import BatchResult, QueueMessage
from ..domain.ports import MessageSink, PublishResult

logger = structlog.get_logger()


class QueueMessageProcessor:
    """Processes a batch of queue messages in arrival order."""

    def __init__(
        self,
        sink: MessageSink | None = None,
        ack_policy: AckPolicy = AckPolicy.ALWAYS,
    ) -> None:
        self._sink = sink
        self._ack_policy = ack_policy

    async def process_batch(self, messages: Sequence[QueueMessage]) -> BatchResult:
        """
        Log and deliver every message of the batch.

        Under AckPolicy.ALWAYS the result never lists failures, so the whole
        batch is acknowledged regardless of content or delivery errors.

        Args:
            messages: Messages in arrival order

        Returns:
            BatchResult whose failed_ids are the message ids SQS should redeliver
        """
        result = BatchResult()

        for message in messages:
            logger.info(
                "Queue message received",
                body=message.body,
                message_id=message.message_id,
            )
            result.processed += 1

            if self._sink is None:
                continue

            delivery = await self._deliver(message)
            if delivery.success:
                continue

            logger.warning(
                "Message delivery failed",
                message_id=message.message_id,
                error=delivery.error,
                ack_policy=self._ack_policy.value,
            )
            if self._ack_policy is AckPolicy.REPORT_FAILURES:
                result.failed_ids.append(message.message_id)

        return result

    async def _deliver(self, message: QueueMessage) -> PublishResult:
        try:
            return await self._sink.deliver(message.body)
        except Exception as e:
            logger.error("Sink raised", message_id=message.message_id, error=str(e))
            return PublishResult(success=False, error=str(e))
