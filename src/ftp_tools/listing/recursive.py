"""Parser for recursive (``LIST -R``) listings.

A recursive listing is a flat stream of lines in which every nested folder
block is introduced by a blank line followed by a header naming the folder::

    -rw-r--r--   1 owner group       10 Jan 15 10:30 f1
    drwxr-xr-x   2 owner group     4096 Jan 15 10:30 b

    /a/b:
    -rw-r--r--   1 owner group       20 Jan 15 10:30 f2

Lines before the first header belong to the listed root.
"""

from enum import Enum
from typing import Iterable

from ftp_tools.core import get_logger

logger = get_logger(__name__)

_FIELD_COUNT = 9


class ListingState(Enum):
    """States of the recursive listing reader."""

    EXPECT_ENTRY_OR_HEADER = "expect_entry_or_header"
    EXPECT_HEADER = "expect_header"


class RecursiveListing:
    """Collects absolute file and folder paths from a recursive listing.

    Attributes:
        root: Path that was listed; folder for lines before the first header
        current_folder: Folder the next data line belongs to
        state: Current reader state
        files: Absolute file paths in discovery order
        folders: Absolute folder paths in discovery order
    """

    def __init__(self, root: str):
        self.root = root
        self.current_folder = root
        self.state = ListingState.EXPECT_ENTRY_OR_HEADER
        self.files: list[str] = []
        self.folders: list[str] = []

    def feed(self, line: str) -> None:
        """Consume one line of the listing."""
        if not line.strip():
            self.state = ListingState.EXPECT_HEADER
            return

        if self.state == ListingState.EXPECT_HEADER:
            self.current_folder = line[:-1] if line.endswith(":") else line
            self.state = ListingState.EXPECT_ENTRY_OR_HEADER
            return

        self._add_entry(line)

    def feed_all(self, lines: Iterable[str]) -> "RecursiveListing":
        for line in lines:
            self.feed(line)
        return self

    def folders_deepest_first(self) -> list[str]:
        """Folders in descending lexicographic order, children before parents."""
        return sorted(self.folders, reverse=True)

    def _add_entry(self, line: str) -> None:
        fields = line.split(None, _FIELD_COUNT - 1)
        if len(fields) < _FIELD_COUNT:
            logger.debug("Recursive listing line skipped", line=line)
            return

        name = fields[_FIELD_COUNT - 1]
        if name in (".", ".."):
            return

        path = f"{self.current_folder}/{name}"
        if fields[0].startswith("d"):
            self.folders.append(path)
        else:
            self.files.append(path)
