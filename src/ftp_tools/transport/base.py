from enum import Enum
from typing import Any, BinaryIO, Optional, Protocol

from ftp_tools.transfer_mode import TransferMode


class TransportFailure(Exception):
    """Raised by a transport when a single request fails.

    Attributes:
        diagnostic: Server or socket error text, when one is available
    """

    def __init__(self, diagnostic: Optional[str] = None):
        super().__init__(diagnostic or "transport failure")
        self.diagnostic = diagnostic


class SessionOption(str, Enum):
    """Runtime options a session can read or change on its transport."""

    TIMEOUT_SEC = "timeout_sec"
    USE_PASV_ADDRESS = "use_pasv_address"


class FtpTransport(Protocol):
    """Protocol for the control connection the session drives.

    Every method performs one request/response exchange. Failures are
    signalled by raising TransportFailure or by returning False.
    """

    def connect(self, host: str, port: int, timeout: float) -> None: ...

    def login(self, user: str, secret: str) -> None: ...

    def system_type(self) -> str: ...

    def rawlist(self, path: str, recursive: bool = False) -> list[str]: ...

    def nlist(self, path: str) -> list[str]: ...

    def put(self, local: str, remote: str, mode: TransferMode) -> None: ...

    def fput(self, stream: BinaryIO, remote: str, mode: TransferMode) -> None: ...

    def get(self, local: str, remote: str, mode: TransferMode) -> None: ...

    def fget(self, stream: BinaryIO, remote: str, mode: TransferMode) -> None: ...

    def mkdir(self, path: str) -> str: ...

    def rmdir(self, path: str) -> None: ...

    def delete(self, path: str) -> None: ...

    def rename(self, source: str, target: str) -> None: ...

    def chdir(self, path: str) -> None: ...

    def cdup(self) -> None: ...

    def chmod(self, mode: int, path: str) -> None: ...

    def pwd(self) -> str: ...

    def size(self, path: str) -> int: ...

    def mdtm(self, path: str) -> int: ...

    def site(self, command: str) -> None: ...

    def exec(self, command: str) -> None: ...

    def get_option(self, option: SessionOption) -> Any: ...

    def set_option(self, option: SessionOption, value: Any) -> None: ...

    def pasv(self, enabled: bool) -> None: ...

    def close(self) -> None: ...
