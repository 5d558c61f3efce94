"""Core utilities and shared components for ftp-tools."""

from .config import settings
from .exceptions import FtpToolsError, ValidationError
from .observability import get_logger, operation_span

__all__ = ["settings", "FtpToolsError", "ValidationError", "get_logger", "operation_span"]
