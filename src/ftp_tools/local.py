"""Local filesystem access used by the tree operations."""

import os

from ftp_tools.core import get_logger
from ftp_tools.core.exceptions import LocalIOError

logger = get_logger(__name__)


class LocalFilesystem:
    """Thin wrapper over ``os`` that raises LocalIOError on OS failures."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def make_dir(self, path: str) -> None:
        """Create a single local directory.

        Args:
            path: Directory to create; its parent must exist

        Raises:
            LocalIOError: If the directory cannot be created
        """
        try:
            os.mkdir(path)
        except OSError as e:
            logger.error("Local mkdir failed", path=path, error=str(e))
            raise LocalIOError(f"could not create local directory '{path}'") from e

    def list_dir(self, path: str) -> list[str]:
        """List the entry names of a local directory, in directory order.

        Raises:
            LocalIOError: If the directory cannot be read
        """
        try:
            return os.listdir(path)
        except OSError as e:
            logger.error("Local listing failed", path=path, error=str(e))
            raise LocalIOError(f"could not open the directory '{path}'") from e
