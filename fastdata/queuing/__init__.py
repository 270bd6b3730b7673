from .processor import StreamRecordProcessor

__all__ = ["StreamRecordProcessor"]
