"""Transport implementation on top of the standard library ftplib client.

Each method maps to one FTP command (or one data transfer) and converts
every ftplib, socket or local I/O error into TransportFailure carrying the
error text as its diagnostic.
"""

import calendar
import ftplib
import os
import tempfile
import time
from contextlib import contextmanager
from typing import Any, BinaryIO, Callable, Iterator, Optional

from ftp_tools.core import get_logger
from ftp_tools.transfer_mode import TransferMode
from ftp_tools.transport.base import SessionOption, TransportFailure

logger = get_logger(__name__)

_BLOCK_SIZE = 8192


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except ftplib.all_errors as e:
        raise TransportFailure(str(e)) from e


class FtplibTransport:
    """FtpTransport backed by ftplib.FTP."""

    def __init__(self, ftp_factory: Callable[[], ftplib.FTP] = ftplib.FTP):
        self._ftp_factory = ftp_factory
        self._ftp: Optional[ftplib.FTP] = None

    @property
    def ftp(self) -> ftplib.FTP:
        if self._ftp is None:
            raise TransportFailure("not connected")
        return self._ftp

    def connect(self, host: str, port: int, timeout: float) -> None:
        ftp = self._ftp_factory()
        with _translate_errors():
            ftp.connect(host, port, timeout)
        self._ftp = ftp
        logger.debug("Control connection opened", host=host, port=port)

    def login(self, user: str, secret: str) -> None:
        with _translate_errors():
            self.ftp.login(user, secret)

    def system_type(self) -> str:
        with _translate_errors():
            reply = self.ftp.sendcmd("SYST")
        # "215 UNIX Type: L8" -> "UNIX Type: L8"
        return reply[4:].strip()

    def rawlist(self, path: str, recursive: bool = False) -> list[str]:
        command = f"LIST -R {path}" if recursive else f"LIST {path}"
        lines: list[str] = []
        with _translate_errors():
            self.ftp.retrlines(command, lines.append)
        return lines

    def nlist(self, path: str) -> list[str]:
        with _translate_errors():
            return self.ftp.nlst(path)

    def put(self, local: str, remote: str, mode: TransferMode) -> None:
        with _translate_errors():
            with open(local, "rb") as stream:
                self._store(stream, remote, mode)

    def fput(self, stream: BinaryIO, remote: str, mode: TransferMode) -> None:
        with _translate_errors():
            self._store(stream, remote, mode)

    def get(self, local: str, remote: str, mode: TransferMode) -> None:
        # an existing local file is only replaced once the transfer completed
        with _translate_errors():
            fd, partial = tempfile.mkstemp(
                dir=os.path.dirname(os.path.abspath(local)), prefix=".", suffix=".part"
            )
            try:
                with os.fdopen(fd, "wb") as stream:
                    self._retrieve(stream, remote, mode)
                os.replace(partial, local)
            finally:
                if os.path.exists(partial):
                    os.unlink(partial)

    def fget(self, stream: BinaryIO, remote: str, mode: TransferMode) -> None:
        with _translate_errors():
            self._retrieve(stream, remote, mode)

    def mkdir(self, path: str) -> str:
        with _translate_errors():
            return self.ftp.mkd(path)

    def rmdir(self, path: str) -> None:
        with _translate_errors():
            self.ftp.rmd(path)

    def delete(self, path: str) -> None:
        with _translate_errors():
            self.ftp.delete(path)

    def rename(self, source: str, target: str) -> None:
        with _translate_errors():
            self.ftp.rename(source, target)

    def chdir(self, path: str) -> None:
        with _translate_errors():
            self.ftp.cwd(path)

    def cdup(self) -> None:
        with _translate_errors():
            self.ftp.voidcmd("CDUP")

    def chmod(self, mode: int, path: str) -> None:
        with _translate_errors():
            self.ftp.voidcmd(f"SITE CHMOD {mode:o} {path}")

    def pwd(self) -> str:
        with _translate_errors():
            return self.ftp.pwd()

    def size(self, path: str) -> int:
        with _translate_errors():
            # some servers refuse SIZE in ASCII mode
            self.ftp.voidcmd("TYPE I")
            size = self.ftp.size(path)
        if size is None:
            raise TransportFailure(f"no size reported for '{path}'")
        return size

    def mdtm(self, path: str) -> int:
        with _translate_errors():
            reply = self.ftp.sendcmd(f"MDTM {path}")
        try:
            stamp = time.strptime(reply[4:18], "%Y%m%d%H%M%S")
        except ValueError:
            raise TransportFailure(f"unexpected MDTM reply: {reply}")
        return calendar.timegm(stamp)

    def site(self, command: str) -> None:
        with _translate_errors():
            self.ftp.voidcmd(f"SITE {command}")

    def exec(self, command: str) -> None:
        with _translate_errors():
            self.ftp.voidcmd(f"SITE EXEC {command}")

    def get_option(self, option: SessionOption) -> Any:
        if option == SessionOption.TIMEOUT_SEC:
            return self.ftp.timeout
        if option == SessionOption.USE_PASV_ADDRESS:
            return not self.ftp.trust_server_pasv_ipv4_address
        raise TransportFailure(f"unsupported option: {option}")

    def set_option(self, option: SessionOption, value: Any) -> None:
        if option == SessionOption.TIMEOUT_SEC:
            try:
                timeout = float(value)
            except (TypeError, ValueError):
                raise TransportFailure(f"invalid timeout: {value!r}")
            if timeout <= 0:
                raise TransportFailure("timeout must be positive")
            self.ftp.timeout = timeout
            if self.ftp.sock is not None:
                self.ftp.sock.settimeout(timeout)
        elif option == SessionOption.USE_PASV_ADDRESS:
            # ftplib ignores the PASV host by default; the option inverts that
            self.ftp.trust_server_pasv_ipv4_address = not bool(value)
        else:
            raise TransportFailure(f"unsupported option: {option}")

    def pasv(self, enabled: bool) -> None:
        self.ftp.set_pasv(enabled)

    def close(self) -> None:
        ftp = self.ftp
        self._ftp = None
        try:
            ftp.quit()
        except ftplib.all_errors as e:
            ftp.close()
            raise TransportFailure(str(e)) from e

    def _store(self, stream: BinaryIO, remote: str, mode: TransferMode) -> None:
        if mode == TransferMode.TEXT:
            self.ftp.storlines(f"STOR {remote}", stream)
        else:
            self.ftp.storbinary(f"STOR {remote}", stream, _BLOCK_SIZE)

    def _retrieve(self, stream: BinaryIO, remote: str, mode: TransferMode) -> None:
        if mode == TransferMode.TEXT:
            encoding = self.ftp.encoding

            def write_line(line: str) -> None:
                stream.write(line.encode(encoding) + b"\n")

            self.ftp.retrlines(f"RETR {remote}", write_line)
        else:
            self.ftp.retrbinary(f"RETR {remote}", stream.write, _BLOCK_SIZE)
