"""Convenience layer for working with FTP servers.

This package wraps a raw FTP control connection in a session object that
adds uniform error reporting, automatic text/binary mode selection, typed
directory listings and recursive tree operations.

Key Features:
    - One method per remote operation with consistent errors
    - Listing parser for UNIX and Windows NT servers
    - Recursive upload, download, delete and size of directory trees
    - CLI interface

Recommended Usage:

    >>> from ftp_tools import FtpConnectionConfig, open_session
    >>> config = FtpConnectionConfig(host="ftp.example.com", user="alice", password="secret")
    >>> with open_session(config) as session:
    ...     session.put_dir("./site", "/www", fail_fast=False)
    ...     total = session.dir_size("/www")

Advanced Usage:
    Plug in a different control connection by passing a transport factory:

    >>> from ftp_tools import FtpSession
    >>> session = FtpSession(transport_factory=MyTransport)
"""

__version__ = "0.1.0"

from .core.exceptions import (
    AuthenticationError,
    FtpConnectionError,
    FtpToolsError,
    ListingError,
    LocalIOError,
    NotADirectoryError,
    PartialTreeError,
    RemoteOperationError,
    SessionError,
    ValidationError,
)
from .listing import DirEntry, EntryKind, ListingStyle, NamedEntry, parse_line
from .schemas import FtpConnectionConfig
from .session import FtpSession, open_session
from .transfer_mode import TransferMode, TransferModeSelector
from .transport import FtplibTransport, FtpTransport, SessionOption, TransportFailure
from .tree import TreeFailure, TreePolicy, TreeResult, TreeWalker

__all__ = [
    # Session
    "FtpSession",
    "FtpConnectionConfig",
    "open_session",
    # Listings
    "DirEntry",
    "EntryKind",
    "ListingStyle",
    "NamedEntry",
    "parse_line",
    # Transfers
    "TransferMode",
    "TransferModeSelector",
    # Trees
    "TreeFailure",
    "TreePolicy",
    "TreeResult",
    "TreeWalker",
    # Transport
    "FtpTransport",
    "FtplibTransport",
    "SessionOption",
    "TransportFailure",
    # Errors
    "AuthenticationError",
    "FtpConnectionError",
    "FtpToolsError",
    "ListingError",
    "LocalIOError",
    "NotADirectoryError",
    "PartialTreeError",
    "RemoteOperationError",
    "SessionError",
    "ValidationError",
]
