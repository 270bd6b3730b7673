"""
Structured logging configuration for the pipeline handlers.

Centralized logging setup with:
- Structured JSON output on stdout
- Correlation ID tracking per Lambda invocation
- Performance timing helpers
"""

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import structlog

# Context variable for invocation correlation
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def configure_logging(service_name: str, level: str = "INFO") -> None:
    """
    Configure structured logging for a handler.

    Args:
        service_name: Name of the service for log context
        level: Standard library level name
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,  # Lambda installs its own root handler
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_service_name(service_name),
            _add_correlation_id,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def _add_service_name(service_name: str):
    """Processor to add service name to all logs."""

    def processor(logger, method_name, event_dict):
        event_dict["service"] = service_name
        return event_dict

    return processor


def _add_correlation_id(logger, method_name, event_dict):
    """Processor to add correlation ID if present."""
    cid = correlation_id.get()
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def get_correlation_id() -> str:
    """Get current correlation ID."""
    return correlation_id.get()


@contextmanager
def invocation_context(context: Any) -> Iterator[None]:
    """
    Bind Lambda invocation details to every log line emitted inside the block.

    The request id becomes the correlation id. Both are cleared on exit so
    that warm containers do not leak context into the next invocation.

    Args:
        context: Lambda context object (may be None when invoked locally)
    """
    request_id = getattr(context, "aws_request_id", "") or ""
    function_name = getattr(context, "function_name", "") or ""

    token = correlation_id.set(request_id)
    try:
        with structlog.contextvars.bound_contextvars(function_name=function_name):
            yield
    finally:
        correlation_id.reset(token)


class Timer:
    """
    Context manager for timing operations.

    Usage:
        with Timer() as t:
            await processor.process_batch(records)
        logger.info("Batch processed", duration_ms=t.duration_ms)
    """

    def __init__(self):
        self._start: float = 0
        self._end: float = 0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        self._end = time.perf_counter()

    @property
    def duration_ms(self) -> float:
        """Duration in milliseconds, rounded to 2 decimal places."""
        return round((self._end - self._start) * 1000, 2)
