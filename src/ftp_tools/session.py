"""FTP session: connection state plus one method per remote operation.

Every remote operation runs through the same envelope (``FtpSession._call``):
it requires a live session, times the call, opens a tracing span, turns a
transport failure into the operation's error class with the server
diagnostic appended to the message, and adds the duration of successful
calls to ``FtpSession.elapsed``.
"""

import time
from typing import Any, BinaryIO, Callable, Optional

from ftp_tools.core import get_logger, operation_span, settings
from ftp_tools.core.exceptions import (
    AuthenticationError,
    FtpConnectionError,
    FtpToolsError,
    ListingError,
    LocalIOError,
    RemoteOperationError,
    SessionError,
    ValidationError,
)
from ftp_tools.listing import (
    DirEntry,
    ListingStyle,
    NamedEntry,
    build_snapshot,
    parse_line,
)
from ftp_tools.local import LocalFilesystem
from ftp_tools.schemas import FtpConnectionConfig
from ftp_tools.transfer_mode import TransferMode, TransferModeSelector
from ftp_tools.transport import (
    FtplibTransport,
    FtpTransport,
    SessionOption,
    TransportFailure,
)
from ftp_tools.tree import TreePolicy, TreeWalker

logger = get_logger(__name__)


def _failure_message(message: str, diagnostic: Optional[str]) -> str:
    return f"{message} ({diagnostic})" if diagnostic else message


def _run(fn: Callable[..., Any], *args: Any, status: bool = True) -> Any:
    result = fn(*args)
    # status calls report a refused command as False; queries may return False
    if status and result is False:
        raise TransportFailure()
    return result


class FtpSession:
    """Stateful FTP client session.

    Attributes:
        host, port, user, password, timeout: Parameters of the last connect
        transport: Live transport, or None when no session is open
        elapsed: Seconds spent in successful remote operations
        passive: Whether data connections use passive mode
        anonymous_password: Secret sent when connect() gets no password
        listing_style: Layout used to parse directory listings
        debug: Emit one log record per operation when enabled
        modes: Extension based transfer mode selector
    """

    def __init__(
        self,
        transport_factory: Callable[[], FtpTransport] = FtplibTransport,
        filesystem: Optional[LocalFilesystem] = None,
        log: Any = None,
        debug: Optional[bool] = None,
        passive: Optional[bool] = None,
        text_extensions: Optional[list[str]] = None,
        anonymous_password: Optional[str] = None,
    ):
        self.transport_factory = transport_factory
        self.filesystem = filesystem or LocalFilesystem()
        self.log = log or logger
        self.debug = settings.debug if debug is None else debug
        self.passive = settings.passive if passive is None else passive
        self.anonymous_password = (
            settings.anonymous_password
            if anonymous_password is None
            else anonymous_password
        )
        self.modes = TransferModeSelector(text_extensions)

        self.host: Optional[str] = None
        self.port: Optional[int] = None
        self.user: Optional[str] = None
        self.password: Optional[str] = None
        self.timeout: Optional[int] = None
        self.transport: Optional[FtpTransport] = None
        self.elapsed = 0.0
        self.listing_style = ListingStyle.UNKNOWN

    def __enter__(self) -> "FtpSession":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if self.transport is None:
            return
        if exc_type is None:
            self.close()
            return
        try:
            self.close()
        except FtpToolsError as e:
            logger.warning("Close failed while handling another error", error=str(e))

    @property
    def connected(self) -> bool:
        return self.transport is not None

    def log_debug(self, operation: str, message: str, **fields: Any) -> None:
        """Emit a diagnostic record when debug output is enabled."""
        if self.debug:
            self.log.info(message, operation=operation, **fields)

    def _require_session(self, operation: str) -> FtpTransport:
        if self.transport is None:
            logger.error("Operation without active session", operation=operation)
            raise SessionError("no active session")
        return self.transport

    def _call(
        self,
        operation: str,
        failure_message: str,
        *args: Any,
        method: Optional[str] = None,
        error: type = RemoteOperationError,
        status: bool = True,
    ) -> Any:
        transport = self._require_session(operation)
        fn = getattr(transport, method or operation)

        start = time.perf_counter()
        with operation_span(operation, self.host):
            try:
                result = _run(fn, *args, status=status)
            except TransportFailure as e:
                message = _failure_message(failure_message, e.diagnostic)
                self.log_debug(operation, message)
                raise error(message) from e

        duration = time.perf_counter() - start
        self.elapsed += duration
        self.log_debug(operation, f"{operation} succeeded", duration=round(duration, 3))
        return result

    def connect(
        self,
        host: str,
        user: str,
        password: Optional[str] = None,
        port: Optional[int] = None,
        timeout: Optional[int] = None,
    ) -> None:
        """Open the control connection, log in and detect the listing style.

        Args:
            host: Server hostname
            user: Login name
            password: Login secret; None sends the anonymous password
            port: Control port (default from settings)
            timeout: Connect and command timeout in seconds

        Raises:
            FtpConnectionError: If the server cannot be reached
            AuthenticationError: If the server rejects the login
        """
        if self.transport is not None:
            self.close()

        start = time.perf_counter()

        self.host = host
        self.user = user
        self.password = password
        self.port = settings.default_port if port is None else port
        self.timeout = settings.default_timeout if timeout is None else timeout
        secret = self.anonymous_password if password is None else password

        self.log_debug("connect", f"connecting to '{host}:{self.port}'")
        transport = self.transport_factory()

        with operation_span("connect", host):
            try:
                _run(transport.connect, host, self.port, self.timeout)
            except TransportFailure as e:
                message = _failure_message(
                    "could not connect to the host", e.diagnostic
                )
                self.log_debug("connect", message)
                raise FtpConnectionError(message) from e

            self.log_debug("connect", f"logging in with '{user}'")
            try:
                _run(transport.login, user, secret)
            except TransportFailure as e:
                message = _failure_message("unable to login", e.diagnostic)
                self.log_debug("connect", message)
                self._discard(transport)
                raise AuthenticationError(message) from e

            try:
                _run(transport.pasv, self.passive)
            except TransportFailure as e:
                self._discard(transport)
                raise RemoteOperationError(
                    _failure_message("could not switch mode", e.diagnostic)
                ) from e

            try:
                system_type = _run(transport.system_type)
            except TransportFailure as e:
                self.log_debug("connect", "system type unavailable", error=str(e))
                system_type = ""

        self.transport = transport
        self.listing_style = ListingStyle.from_system_type(system_type or "")

        duration = time.perf_counter() - start
        self.elapsed += duration
        self.log_debug(
            "connect",
            "connection successful",
            listing_style=self.listing_style.value,
            duration=round(duration, 3),
        )

    def _discard(self, transport: FtpTransport) -> None:
        try:
            transport.close()
        except TransportFailure as e:
            logger.debug("Closing half-open connection failed", error=str(e))

    def parse_line(self, line: str) -> DirEntry:
        """Parse one raw listing line with the session's listing style."""
        return parse_line(line, self.listing_style)

    def raw_list(self, path: str = "./", recursive: bool = False) -> list[str]:
        """Return the unparsed LIST output of a remote directory.

        Raises:
            ListingError: If the listing cannot be retrieved
        """
        message = "unable to get raw list" if recursive else "could not get rawlist"
        return self._call(
            "rawlist", message, path, recursive, method="rawlist", error=ListingError
        )

    def dir_list(self, path: str = "./") -> list[NamedEntry]:
        """List a remote directory as files and directories.

        Args:
            path: Remote directory

        Returns:
            NamedEntry list in the order the server reported it

        Raises:
            SessionError: If no session is open
            ListingError: If the listing cannot be retrieved
        """
        self.log_debug("dir_list", f"retrieving raw list for folder '{path}'")
        return build_snapshot(self.raw_list(path), self.listing_style)

    def nlist(self, path: str = "./") -> list[str]:
        """Return the bare entry names of a remote directory."""
        return self._call(
            "nlist",
            "could not get directory list from server",
            path,
            error=ListingError,
        )

    def put(
        self, local: str, remote: str, mode: TransferMode = TransferMode.AUTO
    ) -> None:
        """Upload a local file.

        AUTO picks the mode from the local file's extension; files without
        one are sent as text.

        Raises:
            LocalIOError: If the local file does not exist
            RemoteOperationError: If the upload fails
        """
        self._require_session("put")
        if not self.filesystem.exists(local):
            self.log_debug("put", f"local file '{local}' does not exist")
            raise LocalIOError(f"local file '{local}' does not exist")

        resolved = self.modes.resolve(mode, local)
        self.log_debug(
            "put", f"uploading file '{local}' to '{remote}'", mode=resolved.value
        )
        self._call(
            "put", f"could not put file ({local}) on server", local, remote, resolved
        )

    def fput(
        self, stream: BinaryIO, remote: str, mode: TransferMode = TransferMode.AUTO
    ) -> None:
        """Upload the contents of an open binary stream.

        AUTO picks the mode from the remote name; names without an
        extension are sent as binary.
        """
        resolved = self.modes.resolve(mode, remote, TransferMode.BINARY)
        self._call("fput", "could not put file on server", stream, remote, resolved)

    def get(
        self, local: str, remote: str, mode: TransferMode = TransferMode.AUTO
    ) -> None:
        """Download a remote file to a local path."""
        resolved = self.modes.resolve(mode, remote)
        self.log_debug(
            "get", f"downloading file '{remote}' to '{local}'", mode=resolved.value
        )
        self._call("get", "could not get file from server", local, remote, resolved)

    def fget(
        self, stream: BinaryIO, remote: str, mode: TransferMode = TransferMode.AUTO
    ) -> None:
        """Download a remote file into an open binary stream."""
        resolved = self.modes.resolve(mode, remote, TransferMode.BINARY)
        self._call("fget", "could not get file from server", stream, remote, resolved)

    def put_dir(
        self,
        local: str,
        remote: str,
        mode: TransferMode = TransferMode.AUTO,
        fail_fast: bool = True,
    ) -> None:
        """Upload a local directory tree into an existing remote directory."""
        TreeWalker(self).upload_tree(local, remote, mode, TreePolicy(fail_fast))

    def get_dir(
        self,
        local: str,
        remote: str,
        mode: TransferMode = TransferMode.AUTO,
        fail_fast: bool = True,
    ) -> None:
        """Download a remote directory tree, creating the local root if needed."""
        TreeWalker(self).download_tree(local, remote, mode, TreePolicy(fail_fast))

    def mkdir(self, path: str) -> str:
        return self._call("mkdir", f"could not create remote directory '{path}'", path)

    def chdir(self, path: str) -> None:
        self._call("chdir", f"could not change the directory to '{path}'", path)

    def cdup(self) -> None:
        self._call("cdup", "could not change the directory")

    def chmod(self, mode: int, path: str) -> None:
        """Change the permission bits of a remote file (e.g. ``0o644``)."""
        self._call(
            "chmod", f"could not change the mode of '{path}' to '{mode:o}'", mode, path
        )

    def pwd(self) -> str:
        return self._call("pwd", "could not get working directory")

    def rename(self, source: str, target: str) -> None:
        self._call(
            "rename", f"could not rename '{source}' to '{target}'", source, target
        )

    def rmdir(self, path: str, recursive: bool = False) -> None:
        """Remove a remote directory.

        Args:
            path: Remote directory
            recursive: Delete the directory's contents first

        Raises:
            RemoteOperationError: If a delete or rmdir fails
            ListingError: If the recursive listing cannot be retrieved
        """
        if recursive:
            TreeWalker(self).delete_tree(path)
            return
        self._call("rmdir", f"could not remove the folder '{path}'", path)

    def delete(self, path: str) -> None:
        self._call("delete", f"could not delete the file '{path}'", path)

    def size(self, path: str) -> int:
        return self._call("size", f"could not get size of '{path}'", path)

    def dir_size(self, path: str, fail_fast: bool = False) -> int:
        """Total size in bytes of all files below a remote directory."""
        return TreeWalker(self).directory_size(path, TreePolicy(fail_fast))

    def pasv(self, enabled: bool) -> None:
        """Switch passive mode on or off; no request is sent if nothing changes."""
        self._require_session("pasv")
        if enabled == self.passive:
            self.log_debug("pasv", "nothing to do", passive=enabled)
            return
        self._call("pasv", "could not switch mode", enabled)
        self.passive = enabled

    def mdtm(self, path: str) -> int:
        """Last modification time of a remote file as a UTC epoch timestamp."""
        return self._call(
            "mdtm", f"could not get last modification date from '{path}'", path
        )

    def site(self, command: str) -> None:
        self._call("site", "could not execute the command", command)

    def exec(self, command: str) -> None:
        self._call("exec", "could not execute the command", command)

    def get_option(self, option: SessionOption) -> Any:
        return self._call(
            "get_option",
            "could not get option from server",
            _session_option(option),
            status=False,
        )

    def set_option(self, option: SessionOption, value: Any) -> None:
        self._call(
            "set_option",
            "could not set option on server",
            _session_option(option),
            value,
        )

    def close(self) -> None:
        """Close the session; the handle is dropped even if the server errors."""
        try:
            self._call("close", "could not close the connection")
        finally:
            self.transport = None


def _session_option(option: Any) -> SessionOption:
    try:
        return SessionOption(option)
    except ValueError:
        raise ValidationError(f"unknown session option: {option}")


def open_session(config: FtpConnectionConfig, **kwargs: Any) -> FtpSession:
    """Create a session from a connection config and connect it.

    Args:
        config: Connection parameters
        **kwargs: Passed to FtpSession (transport_factory, log, debug, ...)

    Returns:
        Connected FtpSession
    """
    session = FtpSession(passive=config.passive, **kwargs)
    session.connect(
        config.host,
        config.user,
        password=config.password,
        port=config.port,
        timeout=config.timeout,
    )
    return session
