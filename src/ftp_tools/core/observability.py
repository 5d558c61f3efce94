"""Observability setup for ftp-tools.

Log records are rendered as JSON lines on stdout by structlog. Remote
operations are traced with one OpenTelemetry span each, named
``ftp.<operation>``; spans are only exported when FTP_TOOLS_OTEL_ENABLED
is set.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .config import settings

TRACER_NAME = "ftp_tools"


def setup_tracing() -> None:
    """Install a console span exporter when tracing is enabled."""
    if not settings.otel_enabled:
        return

    resource = Resource.create({"service.name": settings.otel_service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)


def setup_logging() -> None:
    """Route structlog through stdlib logging at the configured level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a logger instance."""
    return structlog.get_logger(name)


def get_tracer(name: str = TRACER_NAME) -> trace.Tracer:
    return trace.get_tracer(name)


@contextmanager
def operation_span(operation: str, host: Optional[str]) -> Iterator[trace.Span]:
    """Trace one remote operation.

    Args:
        operation: Session operation name, e.g. ``put`` or ``rmdir``
        host: Server the session is connected to

    Yields:
        The active span; exceptions raised inside are recorded on it
    """
    with get_tracer().start_as_current_span(f"ftp.{operation}") as span:
        span.set_attribute("ftp.operation", operation)
        span.set_attribute("ftp.host", host or "")
        yield span


# Initialize on import
setup_logging()
setup_tracing()
