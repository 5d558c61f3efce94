"""Tests for the recursive listing reader."""

from ftp_tools.listing import ListingState, RecursiveListing

LISTING = [
    "-rw-r--r--   1 owner group       10 Jan 15 10:30 f1",
    "drwxr-xr-x   2 owner group     4096 Jan 15 10:30 b",
    "",
    "/a/b:",
    "-rw-r--r--   1 owner group       20 Jan 15 10:30 f2",
    "drwxr-xr-x   2 owner group     4096 Jan 15 10:30 c",
    "",
    "/a/b/c:",
]


class TestRecursiveListing:
    """Test folder tracking across a flat recursive listing."""

    def test_collects_files_and_folders(self):
        """Test absolute paths are built from the current folder."""
        listing = RecursiveListing("/a").feed_all(LISTING)

        assert listing.files == ["/a/f1", "/a/b/f2"]
        assert listing.folders == ["/a/b", "/a/b/c"]

    def test_blank_line_expects_header(self):
        """Test a blank line switches the reader to header mode."""
        listing = RecursiveListing("/a")
        listing.feed("")
        assert listing.state == ListingState.EXPECT_HEADER

        listing.feed("/a/x:")
        assert listing.state == ListingState.EXPECT_ENTRY_OR_HEADER
        assert listing.current_folder == "/a/x"

    def test_header_is_not_treated_as_data(self):
        """Test header lines never become entries."""
        listing = RecursiveListing("/a").feed_all(["", "/a/x:"])

        assert listing.files == []
        assert listing.folders == []

    def test_header_without_colon(self):
        """Test a header without trailing colon is taken verbatim."""
        listing = RecursiveListing("/a").feed_all(
            ["", "/a/x", "-rw-r--r--   1 owner group       1 Jan 15 10:30 f"]
        )
        assert listing.files == ["/a/x/f"]

    def test_short_lines_are_ignored(self):
        """Test lines with fewer than nine fields are skipped."""
        listing = RecursiveListing("/a").feed_all(
            ["total 8", "-rw-r--r--   1 owner group       1 Jan 15 f"]
        )
        assert listing.files == []

    def test_pointers_are_skipped(self):
        """Test '.' and '..' are never collected."""
        listing = RecursiveListing("/a").feed_all(
            [
                "drwxr-xr-x   2 owner group     4096 Jan 15 10:30 .",
                "drwxr-xr-x   2 owner group     4096 Jan 15 10:30 ..",
            ]
        )
        assert listing.folders == []

    def test_name_keeps_inner_spaces(self):
        """Test the ninth field holds the rest of the line."""
        listing = RecursiveListing("/a").feed_all(
            ["-rw-r--r--   1 owner group       1 Jan 15 10:30 two words.txt"]
        )
        assert listing.files == ["/a/two words.txt"]

    def test_folders_deepest_first(self):
        """Test children sort before their parents."""
        listing = RecursiveListing("/a")
        listing.folders = ["/a/b", "/a/b/c", "/a/d"]

        assert listing.folders_deepest_first() == ["/a/d", "/a/b/c", "/a/b"]
