import base64
import hashlib

import structlog
from aiobotocore.session import get_session

from ...domain.ports import NotificationPublisher, PublishResult

logger = structlog.get_logger()

ENCODING_ATTRIBUTE = "content-transfer-encoding"


class SnsNotificationPublisher(NotificationPublisher):
    """AWS SNS adapter implementing NotificationPublisher port."""

    def __init__(
        self,
        topic_arn: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
    ) -> None:
        self._topic_arn = topic_arn
        self._region = region
        self._endpoint_url = endpoint_url
        self._fifo = topic_arn.endswith(".fifo")
        self._session = get_session()

    async def publish(self, payload: bytes, *, group_key: str | None = None) -> PublishResult:
        """Publish the raw payload as an SNS message."""
        if not payload:
            # SNS rejects empty messages
            logger.warning("Skipping empty payload", topic_arn=self._topic_arn)
            return PublishResult(success=True)

        message, is_binary = _encode_message(payload)
        params = {
            "TopicArn": self._topic_arn,
            "Message": message,
        }

        if is_binary:
            params["MessageAttributes"] = {
                ENCODING_ATTRIBUTE: {
                    "DataType": "String",
                    "StringValue": "base64",
                }
            }

        if self._fifo:
            params["MessageGroupId"] = group_key or "default"
            params["MessageDeduplicationId"] = hashlib.sha256(payload).hexdigest()

        client_kwargs = {"region_name": self._region}
        if self._endpoint_url:
            client_kwargs["endpoint_url"] = self._endpoint_url

        try:
            async with self._session.create_client("sns", **client_kwargs) as client:
                response = await client.publish(**params)
                message_id = response.get("MessageId")

                logger.debug("Record published", message_id=message_id, topic_arn=self._topic_arn)
                return PublishResult(success=True, message_id=message_id)

        except Exception as e:
            logger.error("SNS publish failed", error=str(e), topic_arn=self._topic_arn)
            return PublishResult(success=False, error=str(e))


def _encode_message(payload: bytes) -> tuple[str, bool]:
    """SNS messages are text: binary payloads travel base64-encoded."""
    try:
        return payload.decode("utf-8"), False
    except UnicodeDecodeError:
        return base64.b64encode(payload).decode("ascii"), True
