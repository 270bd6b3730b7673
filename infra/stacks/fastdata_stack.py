"""FastData Stack - Kinesis -> queuing Lambda -> SNS -> SQS -> dequeuing Lambdas (main queue and DLQ)."""

from aws_cdk import (
    BundlingOptions,
    Duration,
    Stack,
)
from aws_cdk import (
    aws_iam as iam,
)
from aws_cdk import (
    aws_kinesis as kinesis,
)
from aws_cdk import (
    aws_lambda as lambda_,
)
from aws_cdk import (
    aws_lambda_event_sources as event_sources,
)
from aws_cdk import (
    aws_logs as logs,
)
from aws_cdk import (
    aws_sns as sns,
)
from aws_cdk import (
    aws_sns_subscriptions as subscriptions,
)
from aws_cdk import (
    aws_sqs as sqs,
)
from constructs import Construct

KINESIS_BATCH_SIZE = 100
KINESIS_BATCH_WINDOW_SECONDS = 60
SQS_BATCH_SIZE = 50
SQS_BATCH_WINDOW_SECONDS = 60
DLQ_MAX_RECEIVE_COUNT = 10
KINESIS_RETRY_ATTEMPTS = 3
FUNCTION_TIMEOUT_SECONDS = 60
# SQS event sources need a visibility timeout of at least 6x the function timeout
QUEUE_VISIBILITY_SECONDS = FUNCTION_TIMEOUT_SECONDS * 6


class FastDataStack(Stack):
    """Stream fan-out flow: records are queued per subscriber and dequeued for anomaly processing."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        prj_name: str,
        firehose_stream_name: str | None = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self._firehose_stream_name = firehose_stream_name

        # Source stream (fed by IoT Core rules)
        self.stream = kinesis.Stream(
            self,
            "SourceStream",
            stream_name=f"{prj_name}-kds",
            shard_count=1,
            retention_period=Duration.hours(24),
            encryption=kinesis.StreamEncryption.MANAGED,
        )

        self.topic = sns.Topic(
            self,
            "AnomaliesTopic",
            topic_name=f"{prj_name}-anomalies",
        )

        self.dead_letter_queue = sqs.Queue(
            self,
            "AnomaliesDLQ",
            queue_name=f"{prj_name}-anomalies-dlq",
            retention_period=Duration.days(1),
            visibility_timeout=Duration.seconds(QUEUE_VISIBILITY_SECONDS),
            encryption=sqs.QueueEncryption.SQS_MANAGED,
        )
        self.queue = sqs.Queue(
            self,
            "AnomaliesMainQueue",
            queue_name=f"{prj_name}-anomalies-main-queue",
            visibility_timeout=Duration.seconds(QUEUE_VISIBILITY_SECONDS),
            encryption=sqs.QueueEncryption.SQS_MANAGED,
            dead_letter_queue=sqs.DeadLetterQueue(
                max_receive_count=DLQ_MAX_RECEIVE_COUNT,
                queue=self.dead_letter_queue,
            ),
        )
        # Raw delivery: the queue body is the record payload, not the SNS envelope
        self.topic.add_subscription(
            subscriptions.SqsSubscription(self.queue, raw_message_delivery=True)
        )

        # Package plus its runtime dependencies, built for the function architecture
        code = lambda_.Code.from_asset(
            "..",
            exclude=["infra", "tests", "cdk.out", ".venv", "*.md"],
            bundling=BundlingOptions(
                image=lambda_.Runtime.PYTHON_3_12.bundling_image,
                platform="linux/arm64",
                command=[
                    "bash",
                    "-c",
                    "pip install --no-cache-dir . -t /asset-output",
                ],
            ),
        )

        # Queuing function - Kinesis trigger, publishes to SNS
        self.queuing_function = self._create_function(
            "QueuingFunction",
            function_name=f"fn-{prj_name}-kds-queuing",
            handler="fastdata.queuing.main.handler",
            code=code,
            environment={
                "SERVICE_NAME": "fn-kds-queuing",
                "SNS_TOPIC_ARN": self.topic.topic_arn,
                "PUBLISH_FAILURE_MODE": "skip",
                "LOG_LEVEL": "INFO",
            },
        )
        self.stream.grant_read(self.queuing_function)
        self.topic.grant_publish(self.queuing_function)

        self.queuing_function.add_event_source(
            event_sources.KinesisEventSource(
                self.stream,
                starting_position=lambda_.StartingPosition.TRIM_HORIZON,
                batch_size=KINESIS_BATCH_SIZE,
                max_batching_window=Duration.seconds(KINESIS_BATCH_WINDOW_SECONDS),
                retry_attempts=KINESIS_RETRY_ATTEMPTS,
                bisect_batch_on_error=True,
            )
        )

        # Dequeuing function - main queue, anomalies processing
        self.dequeuing_function = self._create_dequeuing_function(
            "DequeuingFunction",
            function_name=f"fn-{prj_name}-sqs-dequeuing-anomalies",
            handler="fastdata.dequeuing.main.handler",
            service_name="fn-sqs-dequeuing-anomalies",
            code=code,
            queue=self.queue,
        )

        # On-error function - drains the dead-letter queue to the same destination
        self.on_error_function = self._create_dequeuing_function(
            "OnErrorDequeuingFunction",
            function_name=f"fn-{prj_name}-sqs-dequeuing-on-error",
            handler="fastdata.dequeuing.on_error.handler",
            service_name="fn-sqs-dequeuing-on-error",
            code=code,
            queue=self.dead_letter_queue,
        )

    def _create_function(
        self,
        construct_id: str,
        function_name: str,
        handler: str,
        code: lambda_.Code,
        environment: dict[str, str],
    ) -> lambda_.Function:
        return lambda_.Function(
            self,
            construct_id,
            function_name=function_name,
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler=handler,
            code=code,
            environment=environment,
            timeout=Duration.seconds(FUNCTION_TIMEOUT_SECONDS),
            architecture=lambda_.Architecture.ARM_64,
            log_retention=logs.RetentionDays.ONE_MONTH,
        )

    def _create_dequeuing_function(
        self,
        construct_id: str,
        function_name: str,
        handler: str,
        service_name: str,
        code: lambda_.Code,
        queue: sqs.Queue,
    ) -> lambda_.Function:
        """SQS-triggered function with optional Firehose delivery."""
        environment = {
            "SERVICE_NAME": service_name,
            "ACK_POLICY": "always",
            "LOG_LEVEL": "INFO",
        }
        if self._firehose_stream_name:
            environment["FIREHOSE_STREAM_NAME"] = self._firehose_stream_name

        function = self._create_function(
            construct_id,
            function_name=function_name,
            handler=handler,
            code=code,
            environment=environment,
        )
        queue.grant_consume_messages(function)

        if self._firehose_stream_name:
            function.add_to_role_policy(
                iam.PolicyStatement(
                    actions=["firehose:PutRecord", "firehose:PutRecordBatch"],
                    resources=[
                        self.format_arn(
                            service="firehose",
                            resource="deliverystream",
                            resource_name=self._firehose_stream_name,
                        )
                    ],
                )
            )

        function.add_event_source(
            event_sources.SqsEventSource(
                queue,
                batch_size=SQS_BATCH_SIZE,
                max_batching_window=Duration.seconds(SQS_BATCH_WINDOW_SECONDS),
                report_batch_item_failures=True,
            )
        )
        return function
