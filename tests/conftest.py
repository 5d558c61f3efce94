"""Test configuration and fixtures for ftp-tools."""

import posixpath

import pytest

from ftp_tools.session import FtpSession
from ftp_tools.transport import SessionOption, TransportFailure


def _unix_line(name, size=0, is_dir=False):
    if is_dir:
        return f"drwxr-xr-x   2 owner group     4096 Jan 15 10:30 {name}"
    return f"-rw-r--r--   1 owner group {size:>8} Jan 15 10:30 {name}"


class FakeTransport:
    """In-memory FTP server speaking the FtpTransport protocol.

    Directories live in ``dirs`` and file contents in ``files``, both keyed
    by absolute path. Every call is appended to ``calls`` as a tuple of the
    operation name and its path arguments. ``fail(op, path)`` makes a later
    call fail with the given diagnostic.
    """

    def __init__(self, system_type="UNIX Type: L8"):
        self.dirs = {"/"}
        self.files = {}
        self.modes = {}
        self.calls = []
        self.failures = {}
        self.system = system_type
        self.reject_login = False
        self.exec_result = True
        self.refuse_connection = False
        self.connected = False
        self.passive = None
        self.cwd = "/"
        self.chmods = {}
        self.options = {
            SessionOption.TIMEOUT_SEC: 30,
            SessionOption.USE_PASV_ADDRESS: False,
        }

    def fail(self, op, path=None, diagnostic=None):
        self.failures[(op, path)] = diagnostic

    def add_dir(self, path):
        self.dirs.add(path)

    def add_file(self, path, data=b""):
        self.files[path] = data

    def ops(self, *names):
        return [call for call in self.calls if call[0] in names]

    def _enter(self, op, *args):
        self.calls.append((op,) + args)
        path = args[0] if args else None
        for key in ((op, path), (op, None)):
            if key in self.failures:
                raise TransportFailure(self.failures[key])

    def _children(self, path):
        entries = [p for p in self.dirs | set(self.files) if p != "/"]
        return sorted(p for p in entries if posixpath.dirname(p) == path)

    def _lines(self, path):
        return [
            _unix_line(
                posixpath.basename(child),
                size=len(self.files.get(child, b"")),
                is_dir=child in self.dirs,
            )
            for child in self._children(path)
        ]

    def connect(self, host, port, timeout):
        self.calls.append(("connect", host, port, timeout))
        if self.refuse_connection:
            raise TransportFailure("Connection refused")
        self.connected = True

    def login(self, user, secret):
        self.calls.append(("login", user, secret))
        if self.reject_login:
            raise TransportFailure("530 Login incorrect.")

    def system_type(self):
        self._enter("system_type")
        return self.system

    def rawlist(self, path, recursive=False):
        self._enter("rawlist", path, recursive)
        if path not in self.dirs:
            raise TransportFailure(f"450 {path}: No such directory")

        lines = self._lines(path)
        if recursive:
            pending = [child for child in self._children(path) if child in self.dirs]
            while pending:
                folder = pending.pop(0)
                lines += ["", f"{folder}:"] + self._lines(folder)
                pending = [
                    child for child in self._children(folder) if child in self.dirs
                ] + pending
        return lines

    def nlist(self, path):
        self._enter("nlist", path)
        return [posixpath.basename(child) for child in self._children(path)]

    def _store(self, remote, data, mode):
        if posixpath.dirname(remote) not in self.dirs:
            raise TransportFailure("553 Could not create file.")
        self.files[remote] = data
        self.modes[remote] = mode

    def put(self, local, remote, mode):
        self._enter("put", remote)
        with open(local, "rb") as stream:
            self._store(remote, stream.read(), mode)

    def fput(self, stream, remote, mode):
        self._enter("fput", remote)
        self._store(remote, stream.read(), mode)

    def get(self, local, remote, mode):
        self._enter("get", remote)
        if remote not in self.files:
            raise TransportFailure("550 Failed to open file.")
        self.modes[remote] = mode
        with open(local, "wb") as stream:
            stream.write(self.files[remote])

    def fget(self, stream, remote, mode):
        self._enter("fget", remote)
        if remote not in self.files:
            raise TransportFailure("550 Failed to open file.")
        self.modes[remote] = mode
        stream.write(self.files[remote])

    def mkdir(self, path):
        self._enter("mkdir", path)
        if path in self.dirs or posixpath.dirname(path) not in self.dirs:
            raise TransportFailure("550 Create directory operation failed.")
        self.dirs.add(path)
        return path

    def rmdir(self, path):
        self._enter("rmdir", path)
        if path not in self.dirs or self._children(path):
            raise TransportFailure("550 Remove directory operation failed.")
        self.dirs.remove(path)

    def delete(self, path):
        self._enter("delete", path)
        if path not in self.files:
            raise TransportFailure("550 Delete operation failed.")
        del self.files[path]

    def rename(self, source, target):
        self._enter("rename", source, target)
        if source not in self.files:
            raise TransportFailure("550 RNFR command failed.")
        self.files[target] = self.files.pop(source)

    def chdir(self, path):
        self._enter("chdir", path)
        if path not in self.dirs:
            raise TransportFailure("550 Failed to change directory.")
        self.cwd = path

    def cdup(self):
        self._enter("cdup")
        self.cwd = posixpath.dirname(self.cwd)

    def chmod(self, mode, path):
        self._enter("chmod", path)
        self.chmods[path] = mode

    def pwd(self):
        self._enter("pwd")
        return self.cwd

    def size(self, path):
        self._enter("size", path)
        if path not in self.files:
            raise TransportFailure("550 Could not get file size.")
        return len(self.files[path])

    def mdtm(self, path):
        self._enter("mdtm", path)
        return 1705314600

    def site(self, command):
        self._enter("site", command)

    def exec(self, command):
        self._enter("exec", command)
        return self.exec_result

    def get_option(self, option):
        self._enter("get_option", option)
        return self.options[option]

    def set_option(self, option, value):
        self._enter("set_option", option)
        self.options[option] = value

    def pasv(self, enabled):
        self._enter("pasv", enabled)
        self.passive = enabled

    def close(self):
        self._enter("close")
        self.connected = False


@pytest.fixture
def fake_transport():
    """Create an empty in-memory FTP server."""
    return FakeTransport()


@pytest.fixture
def session(fake_transport):
    """Create a session connected to the fake server."""
    ftp = FtpSession(transport_factory=lambda: fake_transport)
    ftp.connect("ftp.example.com", "alice", "secret")
    return ftp


@pytest.fixture
def local_tree(tmp_path):
    """Create a sample local directory tree for uploads."""
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text("<html></html>")
    (root / "logo.png").write_bytes(b"\x89PNG")

    css = root / "css"
    css.mkdir()
    (css / "style.css").write_text("body {}")

    return root


@pytest.fixture
def make_transport():
    """Return the fake server class for tests that need fresh instances."""
    return FakeTransport
