"""Typed view of one remote directory built from its raw listing."""

from dataclasses import dataclass
from typing import Iterable

from ftp_tools.core import get_logger
from ftp_tools.listing.parser import EntryKind, ListingStyle, parse_line

logger = get_logger(__name__)


@dataclass(frozen=True)
class NamedEntry:
    """Name and kind of a directory member.

    Attributes:
        name: Base name of the entry
        kind: EntryKind.FILE or EntryKind.DIRECTORY (symlinks count as files)
    """

    name: str
    kind: EntryKind

    @property
    def is_dir(self) -> bool:
        return self.kind == EntryKind.DIRECTORY


def build_snapshot(lines: Iterable[str], style: ListingStyle) -> list[NamedEntry]:
    """Turn raw listing lines into files and directories.

    Symlinks are folded into files, unparseable lines are dropped and the
    order of the listing is kept.

    Args:
        lines: Raw LIST output, one entry per line
        style: Listing layout of the server

    Returns:
        List of NamedEntry in listing order
    """
    entries = []
    for line in lines:
        entry = parse_line(line, style)
        if entry.kind == EntryKind.INVALID:
            continue
        if entry.kind == EntryKind.DIRECTORY:
            entries.append(NamedEntry(name=entry.name, kind=EntryKind.DIRECTORY))
        else:
            entries.append(NamedEntry(name=entry.name, kind=EntryKind.FILE))

    logger.debug("Directory snapshot built", entry_count=len(entries))
    return entries
