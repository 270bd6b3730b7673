"""
Record processor for the queuing handler.

Logs every Kinesis record of a batch in arrival order and, when a
NotificationPublisher is injected, forwards each record to the topic.
"""

from collections.abc import Sequence

import structlog

from ..config import PublishFailureMode
from ..domain import BatchResult, PublishError, StreamRecord
from ..domain.ports import NotificationPublisher, PublishResult

logger = structlog.get_logger()


class StreamRecordProcessor:
    """
    Processes a batch of stream records.

    Records are handled strictly one after another; a publish call is
    awaited before the next record is logged.
    """

    def __init__(
        self,
        publisher: NotificationPublisher | None = None,
        failure_mode: PublishFailureMode = PublishFailureMode.SKIP,
    ) -> None:
        """
        Initialize with injected dependencies.

        Args:
            publisher: Downstream topic, or None to leave forwarding unconnected
            failure_mode: SKIP logs and continues, ABORT raises PublishError
        """
        self._publisher = publisher
        self._failure_mode = failure_mode

    async def process_batch(self, records: Sequence[StreamRecord]) -> BatchResult:
        """
        Log and forward every record of the batch.

        Args:
            records: Records in arrival order

        Returns:
            BatchResult with the sequence numbers of records that failed to publish

        Raises:
            PublishError: on the first failed publish when failure_mode is ABORT
        """
        result = BatchResult()

        for record in records:
            logger.info(
                "Stream record received",
                payload=record.data,
                sequence_number=record.sequence_number,
                partition_key=record.partition_key,
                decoded=record.decoded,
            )
            result.processed += 1

            if self._publisher is None:
                continue

            publish_result = await self._publish(record)
            if publish_result.success:
                continue

            if self._failure_mode is PublishFailureMode.ABORT:
                raise PublishError(record.sequence_number, publish_result.error or "unknown error")

            logger.warning(
                "Skipping record after publish failure",
                sequence_number=record.sequence_number,
                error=publish_result.error,
            )
            result.failed_ids.append(record.sequence_number)

        return result

    async def _publish(self, record: StreamRecord) -> PublishResult:
        try:
            return await self._publisher.publish(record.data, group_key=record.partition_key or None)
        except Exception as e:
            logger.error(
                "Publisher raised",
                sequence_number=record.sequence_number,
                error=str(e),
            )
            return PublishResult(success=False, error=str(e))
