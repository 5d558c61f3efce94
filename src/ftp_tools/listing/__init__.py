"""Remote directory listing parsers."""

from .parser import DirEntry, EntryKind, ListingStyle, parse_line
from .recursive import ListingState, RecursiveListing
from .snapshot import NamedEntry, build_snapshot

__all__ = [
    "DirEntry",
    "EntryKind",
    "ListingStyle",
    "parse_line",
    "ListingState",
    "RecursiveListing",
    "NamedEntry",
    "build_snapshot",
]
