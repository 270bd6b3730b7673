import structlog
from aiobotocore.session import get_session

from ...domain.ports import MessageSink, PublishResult

logger = structlog.get_logger()


class FirehoseMessageSink(MessageSink):
    """Kinesis Data Firehose adapter implementing MessageSink port."""

    def __init__(
        self,
        delivery_stream_name: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
    ) -> None:
        self._delivery_stream_name = delivery_stream_name
        self._region = region
        self._endpoint_url = endpoint_url
        self._session = get_session()

    async def deliver(self, body: str) -> PublishResult:
        """Write one newline-terminated body to the delivery stream."""
        client_kwargs = {"region_name": self._region}
        if self._endpoint_url:
            client_kwargs["endpoint_url"] = self._endpoint_url

        try:
            async with self._session.create_client("firehose", **client_kwargs) as client:
                response = await client.put_record(
                    DeliveryStreamName=self._delivery_stream_name,
                    Record={"Data": (body + "\n").encode("utf-8", errors="surrogateescape")},
                )
                record_id = response.get("RecordId")

                logger.debug("Message delivered", record_id=record_id)
                return PublishResult(success=True, message_id=record_id)

        except Exception as e:
            logger.error(
                "Firehose delivery failed",
                error=str(e),
                delivery_stream=self._delivery_stream_name,
            )
            return PublishResult(success=False, error=str(e))
