"""Control-connection transports."""

from .base import FtpTransport, SessionOption, TransportFailure
from .ftplib_transport import FtplibTransport

__all__ = ["FtpTransport", "SessionOption", "TransportFailure", "FtplibTransport"]
