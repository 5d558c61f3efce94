"""Text/binary transfer mode selection by file extension."""

import re
from enum import Enum
from typing import Iterable, Optional

from ftp_tools.core import get_logger, settings

logger = get_logger(__name__)

_EXTENSION_PATTERN = re.compile(r"\.([a-z0-9]+)$", re.IGNORECASE)


class TransferMode(str, Enum):
    """Requested or resolved transfer mode.

    AUTO is only a request; it is resolved to TEXT or BINARY before any
    transport call.
    """

    AUTO = "auto"
    TEXT = "text"
    BINARY = "binary"


class TransferModeSelector:
    """Maps filenames to a transfer mode using a set of text extensions."""

    def __init__(self, extensions: Optional[Iterable[str]] = None):
        if extensions is None:
            extensions = settings.text_extensions
        self.text_extensions = {extension.lower() for extension in extensions}

    def mode_for(
        self, filename: str, default: TransferMode = TransferMode.TEXT
    ) -> TransferMode:
        """Return the transfer mode for a filename.

        Args:
            filename: Local or remote file name or path
            default: Mode used when the name has no recognizable extension

        Returns:
            TransferMode.TEXT or TransferMode.BINARY
        """
        match = _EXTENSION_PATTERN.search(filename)
        if match is None:
            logger.debug("No file extension found", filename=filename)
            return default

        extension = match.group(1).lower()
        if extension in {known.lower() for known in self.text_extensions}:
            return TransferMode.TEXT
        return TransferMode.BINARY

    def resolve(
        self,
        requested: TransferMode,
        filename: str,
        default: TransferMode = TransferMode.TEXT,
    ) -> TransferMode:
        """Resolve an AUTO request; explicit TEXT/BINARY pass through."""
        requested = TransferMode(requested)
        if requested is not TransferMode.AUTO:
            return requested
        return self.mode_for(filename, default)
