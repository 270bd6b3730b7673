"""Lambda handlers for the FastData Kinesis -> SNS -> SQS pipeline."""
