class FastDataError(Exception):
    """Base error for the pipeline handlers."""

    pass


class PublishError(FastDataError):
    """Raised when a record could not be forwarded and the batch must be retried."""

    def __init__(self, record_id: str, reason: str) -> None:
        super().__init__(f"Failed to publish record {record_id}: {reason}")
        self.record_id = record_id
        self.reason = reason
