"""Recursive operations over whole directory trees.

Each walk either stops at the first failing entry (``fail_fast``) or keeps
going and raises one PartialTreeError at the end listing every entry that
failed. Nothing already transferred or deleted is rolled back.
"""

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ftp_tools.core import get_logger
from ftp_tools.core.exceptions import (
    FtpToolsError,
    LocalIOError,
    NotADirectoryError,
    PartialTreeError,
)
from ftp_tools.listing import RecursiveListing
from ftp_tools.transfer_mode import TransferMode

if TYPE_CHECKING:
    from ftp_tools.session import FtpSession

logger = get_logger(__name__)

UPLOAD_FAILED = "unable to copy folder to server"
DOWNLOAD_FAILED = "unable to copy folder from server"
SIZE_FAILED = "unable to get size of folder from server"

_POINTERS = (".", "..")


def _local_child(local: str, name: str) -> str:
    """Join a remote entry name onto a local directory, refusing escapes."""
    separators = {"/", os.sep, os.altsep} - {None}
    if os.path.isabs(name) or any(sep in name for sep in separators):
        raise LocalIOError(f"refusing unsafe remote entry name '{name}'")

    root = os.path.abspath(local)
    child = os.path.abspath(os.path.join(root, name))
    if child == root or os.path.commonpath([root, child]) != root:
        raise LocalIOError(f"refusing unsafe remote entry name '{name}'")
    return os.path.join(local, name)


@dataclass(frozen=True)
class TreePolicy:
    """How a tree walk reacts to a failing child."""

    fail_fast: bool = True


@dataclass(frozen=True)
class TreeFailure:
    """One entry that could not be processed.

    Attributes:
        path: Remote path of the entry
        error: Error raised while processing it
    """

    path: str
    error: FtpToolsError


@dataclass
class TreeResult:
    """Failures collected across a whole walk, nested subtrees included."""

    failures: list[TreeFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self, message: str) -> None:
        if self.failures:
            raise PartialTreeError(message, self.failures)


class TreeWalker:
    """Runs tree operations on top of a session's single-entry operations."""

    def __init__(self, session: "FtpSession"):
        self.session = session
        self.filesystem = session.filesystem

    def _record(
        self, result: TreeResult, policy: TreePolicy, path: str, error: FtpToolsError
    ) -> None:
        if policy.fail_fast:
            raise error
        logger.warning("Tree entry failed", path=path, error=str(error))
        result.failures.append(TreeFailure(path=path, error=error))

    def upload_tree(
        self,
        local: str,
        remote: str,
        mode: TransferMode = TransferMode.AUTO,
        policy: TreePolicy = TreePolicy(),
    ) -> TreeResult:
        """Copy a local directory tree into an existing remote directory.

        Subdirectories are created remotely before their contents are sent.

        Args:
            local: Local directory whose contents are uploaded
            remote: Remote directory receiving them
            mode: Transfer mode for every file (AUTO picks per file)
            policy: Failure policy

        Returns:
            TreeResult with no failures

        Raises:
            NotADirectoryError: If local is not a directory
            PartialTreeError: If some entries failed in best-effort mode
        """
        self.session._require_session("put_dir")
        self.session.log_debug("put_dir", f"uploading folder '{local}' to '{remote}'")

        result = TreeResult()
        self._upload(local, remote, mode, policy, result)
        result.raise_for_failures(UPLOAD_FAILED)

        self.session.log_debug("put_dir", "successfully copied folder")
        return result

    def _upload(
        self,
        local: str,
        remote: str,
        mode: TransferMode,
        policy: TreePolicy,
        result: TreeResult,
    ) -> None:
        if not self.filesystem.is_dir(local):
            raise NotADirectoryError(f"local path '{local}' is not a directory")

        for name in self.filesystem.list_dir(local):
            if name in _POINTERS:
                continue

            local_child = os.path.join(local, name)
            remote_child = f"{remote}/{name}"
            try:
                if self.filesystem.is_dir(local_child):
                    self.session.mkdir(remote_child)
                    self._upload(local_child, remote_child, mode, policy, result)
                else:
                    self.session.put(local_child, remote_child, mode)
            except FtpToolsError as e:
                self._record(result, policy, remote_child, e)

    def download_tree(
        self,
        local: str,
        remote: str,
        mode: TransferMode = TransferMode.AUTO,
        policy: TreePolicy = TreePolicy(),
    ) -> TreeResult:
        """Copy a remote directory tree to a local directory.

        The local root is created when missing; its parent must exist.

        Raises:
            NotADirectoryError: If local exists and is not a directory
            LocalIOError: If the local root cannot be created
            ListingError: If the remote root cannot be listed
            PartialTreeError: If some entries failed in best-effort mode
        """
        self.session._require_session("get_dir")
        self.session.log_debug("get_dir", f"downloading folder '{remote}' to '{local}'")

        result = TreeResult()
        self._download(local, remote, mode, policy, result)
        result.raise_for_failures(DOWNLOAD_FAILED)

        self.session.log_debug("get_dir", "successfully copied folder")
        return result

    def _download(
        self,
        local: str,
        remote: str,
        mode: TransferMode,
        policy: TreePolicy,
        result: TreeResult,
    ) -> None:
        if self.filesystem.exists(local):
            if not self.filesystem.is_dir(local):
                raise NotADirectoryError(f"local path '{local}' is not a directory")
        else:
            self.filesystem.make_dir(local)

        for entry in self.session.dir_list(remote):
            if entry.name in _POINTERS:
                continue

            remote_child = f"{remote}/{entry.name}"
            try:
                local_child = _local_child(local, entry.name)
                if entry.is_dir:
                    self._download(local_child, remote_child, mode, policy, result)
                else:
                    self.session.get(local_child, remote_child, mode)
            except FtpToolsError as e:
                self._record(result, policy, remote_child, e)

    def delete_tree(self, path: str) -> None:
        """Delete a remote directory and everything below it.

        Files from a single recursive listing are deleted first in listing
        order, then the folders deepest first, then the directory itself.
        Any failure stops the walk.
        """
        self.session.log_debug("rmdir", f"recursively deleting folder '{path}'")

        lines = self.session.raw_list(path, recursive=True)
        listing = RecursiveListing(path).feed_all(lines)
        logger.debug(
            "Recursive listing parsed",
            path=path,
            file_count=len(listing.files),
            folder_count=len(listing.folders),
        )

        for file_path in listing.files:
            self.session.delete(file_path)

        for folder in listing.folders_deepest_first():
            self.delete_tree(folder)

        self.session.rmdir(path)

    def directory_size(
        self, path: str, policy: TreePolicy = TreePolicy(fail_fast=False)
    ) -> int:
        """Sum the sizes of all files below a remote directory.

        Raises:
            ListingError: If the directory itself cannot be listed
            PartialTreeError: If some entries failed in best-effort mode
        """
        self.session.log_debug("dir_size", f"getting size of folder '{path}'")

        result = TreeResult()
        total = self._size(path, policy, result)
        result.raise_for_failures(SIZE_FAILED)

        self.session.log_debug(
            "dir_size", f"successfully got size of folder '{path}'", size=total
        )
        return total

    def _size(self, path: str, policy: TreePolicy, result: TreeResult) -> int:
        total = 0
        for entry in self.session.dir_list(path):
            if entry.name in _POINTERS:
                continue

            child = f"{path}/{entry.name}"
            try:
                if entry.is_dir:
                    total += self._size(child, policy, result)
                else:
                    total += self.session.size(child)
            except FtpToolsError as e:
                self._record(result, policy, child, e)
        return total
