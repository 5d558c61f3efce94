"""Parser for raw FTP directory listing lines.

Servers answer LIST with free-form text whose layout depends on the
operating system. Two layouts are understood:

UNIX (``ls -l`` style)::

    drwxr-xr-x   2 owner group     4096 Jan 15 10:30 docs
    -rw-r--r--   1 owner group     1024 Jan 15  2023 notes.txt
    lrwxrwxrwx   1 owner group        9 Jan 15 10:30 latest -> notes.txt

Windows NT (IIS style)::

    01-15-24  10:30AM       <DIR>          docs
    01-15-24  10:30AM                 1024 notes.txt

Every line maps to exactly one DirEntry; lines that cannot be understood
become INVALID entries instead of raising.
"""

import re
from dataclasses import dataclass
from enum import Enum

from ftp_tools.core import get_logger

logger = get_logger(__name__)

_UNIX_PATTERN = re.compile(
    r"^(.)[rwxsStT-]{9}.* ([0-9]*) [a-zA-Z]+ [0-9: ]*[0-9] (.+)"
)
_WINDOWS_DIR_PATTERN = re.compile(r"[-0-9]+ *[0-9:]+[PA]?M? +<DIR> {10}(.*)")
_WINDOWS_FILE_PATTERN = re.compile(r"[-0-9]+ *[0-9:]+[PA]?M? +([0-9]+) (.*)")

SYMLINK_SEPARATOR = " -> "


class EntryKind(str, Enum):
    """Kind of filesystem object reported by a listing line."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    INVALID = "invalid"


class ListingStyle(str, Enum):
    """Listing layout, fixed per session from the server system type."""

    UNIX = "unix"
    WINDOWS_NT = "windows_nt"
    UNKNOWN = "unknown"

    @classmethod
    def from_system_type(cls, system_type: str) -> "ListingStyle":
        """Map a SYST reply (e.g. ``UNIX Type: L8``) to a listing style."""
        words = system_type.split()
        token = words[0] if words else ""
        if token.upper() == "UNIX":
            return cls.UNIX
        if token.upper() == "WINDOWS_NT":
            return cls.WINDOWS_NT
        return cls.UNKNOWN


@dataclass(frozen=True)
class DirEntry:
    """One object from a remote listing.

    Attributes:
        kind: File, directory, symlink or invalid
        size: Size in bytes for files, 0 for every other kind
        name: Base name; for symlinks the link's own name without its target
    """

    kind: EntryKind
    size: int
    name: str


INVALID_ENTRY = DirEntry(kind=EntryKind.INVALID, size=0, name="")


def parse_line(line: str, style: ListingStyle) -> DirEntry:
    """Parse one raw listing line into a DirEntry.

    Args:
        line: A single line of LIST output
        style: Listing layout of the server that produced the line

    Returns:
        The parsed entry; INVALID when the line is a summary line, does not
        match the layout, or the style is unknown
    """
    if line.startswith("total"):
        logger.debug("Listing summary line skipped", line=line)
        entry = INVALID_ENTRY
    elif style == ListingStyle.WINDOWS_NT:
        entry = _parse_windows_line(line)
    elif style == ListingStyle.UNIX:
        entry = _parse_unix_line(line)
    else:
        logger.debug("Unknown listing style", line=line, style=str(style))
        entry = INVALID_ENTRY

    # "." and ".." are reported as plain files
    if entry.name in (".", ".."):
        entry = DirEntry(kind=EntryKind.FILE, size=0, name=entry.name)

    return entry


def _parse_unix_line(line: str) -> DirEntry:
    match = _UNIX_PATTERN.match(line)
    if match is None:
        logger.debug("Invalid UNIX listing line", line=line)
        return INVALID_ENTRY

    flag, size, name = match.groups()
    if flag == "d":
        return DirEntry(kind=EntryKind.DIRECTORY, size=0, name=name)
    if flag == "l":
        name = name.split(SYMLINK_SEPARATOR, 1)[0]
        return DirEntry(kind=EntryKind.SYMLINK, size=0, name=name)
    return DirEntry(kind=EntryKind.FILE, size=int(size or 0), name=name)


def _parse_windows_line(line: str) -> DirEntry:
    match = _WINDOWS_DIR_PATTERN.search(line)
    if match is not None:
        return DirEntry(kind=EntryKind.DIRECTORY, size=0, name=match.group(1))

    match = _WINDOWS_FILE_PATTERN.search(line)
    if match is not None:
        return DirEntry(
            kind=EntryKind.FILE, size=int(match.group(1)), name=match.group(2)
        )

    logger.debug("Invalid Windows listing line", line=line)
    return INVALID_ENTRY
