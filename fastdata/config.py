from enum import Enum

from pydantic_settings import BaseSettings


class PublishFailureMode(str, Enum):
    """What the queuing handler does when forwarding a record fails."""
    SKIP = "skip"
    ABORT = "abort"


class AckPolicy(str, Enum):
    """How the dequeuing handler acknowledges a batch to SQS."""
    ALWAYS = "always"
    REPORT_FAILURES = "report_failures"


class Settings(BaseSettings):
    """Handler settings loaded from environment."""

    # Service
    service_name: str = "fastdata"
    log_level: str = "INFO"

    # AWS
    aws_region: str = "us-east-1"
    aws_endpoint_url: str | None = None  # For LocalStack

    # Queuing (Kinesis -> SNS)
    sns_topic_arn: str | None = None  # Forwarding disabled when unset
    publish_failure_mode: PublishFailureMode = PublishFailureMode.SKIP

    # Dequeuing (SQS -> Firehose)
    firehose_stream_name: str | None = None  # Sink disabled when unset
    ack_policy: AckPolicy = AckPolicy.ALWAYS

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
