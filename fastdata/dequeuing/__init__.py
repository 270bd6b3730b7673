from .processor import QueueMessageProcessor

__all__ = ["QueueMessageProcessor"]
