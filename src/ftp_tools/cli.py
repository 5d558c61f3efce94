"""Command-line interface for ftp-tools.

Commands:
    - ls: List a remote directory
    - upload: Upload a local file or directory tree
    - download: Download a remote directory tree (or a single file)
    - rmtree: Delete a remote directory and everything below it
    - du: Total size of the files below a remote directory

Connection options (--host, --user, ...) are shared by every command;
their defaults come from the FTP_TOOLS_* environment settings.
"""

import os
from typing import Annotated, Optional

import pydantic
import typer

from . import __version__
from .core import settings
from .core.exceptions import FtpToolsError, PartialTreeError
from .schemas import FtpConnectionConfig
from .session import FtpSession, open_session
from .transfer_mode import TransferMode

app = typer.Typer(
    name="ftp-tools",
    help="Convenience operations on FTP servers.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"ftp-tools {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    FTP-Tools: listing, transfers and recursive tree operations over FTP.
    """
    pass


HostOption = Annotated[str, typer.Option("--host", "-H", help="FTP server hostname")]
PortOption = Annotated[int, typer.Option("--port", "-p", help="FTP control port")]
UserOption = Annotated[str, typer.Option("--user", "-u", help="FTP username")]
PasswordOption = Annotated[
    Optional[str],
    typer.Option(
        "--password",
        help="FTP password (anonymous password when omitted)",
        envvar="FTP_TOOLS_PASSWORD",
    ),
]
TimeoutOption = Annotated[
    int, typer.Option("--timeout", help="Connect and command timeout in seconds")
]
ActiveOption = Annotated[
    bool, typer.Option("--active", help="Use active instead of passive mode")
]
DebugOption = Annotated[
    bool, typer.Option("--debug", help="Log every FTP operation with its duration")
]
ModeOption = Annotated[
    TransferMode,
    typer.Option(
        "--mode",
        "-m",
        help="Transfer mode: auto (by extension), text or binary",
        case_sensitive=False,
    ),
]
FailFastOption = Annotated[
    bool,
    typer.Option(
        "--fail-fast/--best-effort",
        help="Stop at the first failing entry or continue and report all failures",
    ),
]


def _connect(
    host: str,
    port: int,
    user: str,
    password: Optional[str],
    timeout: int,
    active: bool,
    debug: bool,
) -> FtpSession:
    """Validate the connection options and open a session."""
    config = FtpConnectionConfig(
        host=host,
        port=port,
        user=user,
        password=password,
        timeout=timeout,
        passive=not active,
    )
    return open_session(config, debug=debug)


def _report_error(e: Exception) -> None:
    typer.echo(f"Error: {e}", err=True)
    if isinstance(e, PartialTreeError):
        for failure in e.failures:
            typer.echo(f"  {failure.path}: {failure.error}", err=True)


def _human_size(total_bytes: int) -> str:
    if total_bytes >= 1024**3:
        return f"{total_bytes / (1024**3):.2f} GB"
    elif total_bytes >= 1024**2:
        return f"{total_bytes / (1024**2):.2f} MB"
    elif total_bytes >= 1024:
        return f"{total_bytes / 1024:.2f} KB"
    return f"{total_bytes} bytes"


@app.command("ls")
def ls_cmd(
    path: Annotated[str, typer.Argument(help="Remote directory to list")] = "./",
    host: HostOption = "localhost",
    port: PortOption = settings.default_port,
    user: UserOption = "anonymous",
    password: PasswordOption = None,
    timeout: TimeoutOption = settings.default_timeout,
    active: ActiveOption = False,
    debug: DebugOption = settings.debug,
) -> None:
    """
    List a remote directory, one entry per line ("d" marks directories).

    Example:
        ftp-tools ls /pub --host ftp.example.com
    """
    try:
        with _connect(host, port, user, password, timeout, active, debug) as session:
            entries = session.dir_list(path)

        for entry in entries:
            marker = "d" if entry.is_dir else "-"
            typer.echo(f"{marker} {entry.name}")

    except (FtpToolsError, pydantic.ValidationError) as e:
        _report_error(e)
        raise typer.Exit(1)


@app.command("upload")
def upload_cmd(
    local: Annotated[str, typer.Argument(help="Local file or directory")],
    remote: Annotated[str, typer.Argument(help="Remote file or existing directory")],
    host: HostOption = "localhost",
    port: PortOption = settings.default_port,
    user: UserOption = "anonymous",
    password: PasswordOption = None,
    timeout: TimeoutOption = settings.default_timeout,
    active: ActiveOption = False,
    debug: DebugOption = settings.debug,
    mode: ModeOption = TransferMode.AUTO,
    fail_fast: FailFastOption = True,
) -> None:
    """
    Upload a local file, or the contents of a local directory.

    Examples:
        File: ftp-tools upload report.csv /incoming/report.csv --host ftp.example.com
        Tree: ftp-tools upload ./site /www --host ftp.example.com --best-effort
    """
    try:
        with _connect(host, port, user, password, timeout, active, debug) as session:
            if os.path.isdir(local):
                session.put_dir(local, remote, mode, fail_fast=fail_fast)
            else:
                session.put(local, remote, mode)
            elapsed = session.elapsed

        typer.echo(f"Uploaded {local} to {remote} in {elapsed:.3f}s")

    except (FtpToolsError, pydantic.ValidationError) as e:
        _report_error(e)
        raise typer.Exit(1)


@app.command("download")
def download_cmd(
    remote: Annotated[str, typer.Argument(help="Remote directory (or file)")],
    local: Annotated[str, typer.Argument(help="Local target path")],
    host: HostOption = "localhost",
    port: PortOption = settings.default_port,
    user: UserOption = "anonymous",
    password: PasswordOption = None,
    timeout: TimeoutOption = settings.default_timeout,
    active: ActiveOption = False,
    debug: DebugOption = settings.debug,
    mode: ModeOption = TransferMode.AUTO,
    fail_fast: FailFastOption = True,
    single_file: Annotated[
        bool, typer.Option("--file", help="Download a single remote file")
    ] = False,
) -> None:
    """
    Download a remote directory tree, or a single file with --file.

    Examples:
        Tree: ftp-tools download /www ./site --host ftp.example.com
        File: ftp-tools download /pub/readme.txt readme.txt --file --host ftp.example.com
    """
    try:
        with _connect(host, port, user, password, timeout, active, debug) as session:
            if single_file:
                session.get(local, remote, mode)
            else:
                session.get_dir(local, remote, mode, fail_fast=fail_fast)
            elapsed = session.elapsed

        typer.echo(f"Downloaded {remote} to {local} in {elapsed:.3f}s")

    except (FtpToolsError, pydantic.ValidationError) as e:
        _report_error(e)
        raise typer.Exit(1)


@app.command("rmtree")
def rmtree_cmd(
    path: Annotated[str, typer.Argument(help="Remote directory to delete")],
    host: HostOption = "localhost",
    port: PortOption = settings.default_port,
    user: UserOption = "anonymous",
    password: PasswordOption = None,
    timeout: TimeoutOption = settings.default_timeout,
    active: ActiveOption = False,
    debug: DebugOption = settings.debug,
) -> None:
    """
    Delete a remote directory together with all files and folders below it.
    """
    try:
        with _connect(host, port, user, password, timeout, active, debug) as session:
            session.rmdir(path, recursive=True)

        typer.echo(f"Removed {path}")

    except (FtpToolsError, pydantic.ValidationError) as e:
        _report_error(e)
        raise typer.Exit(1)


@app.command("du")
def du_cmd(
    path: Annotated[str, typer.Argument(help="Remote directory to measure")],
    host: HostOption = "localhost",
    port: PortOption = settings.default_port,
    user: UserOption = "anonymous",
    password: PasswordOption = None,
    timeout: TimeoutOption = settings.default_timeout,
    active: ActiveOption = False,
    debug: DebugOption = settings.debug,
    fail_fast: Annotated[
        bool,
        typer.Option(
            "--fail-fast/--best-effort",
            help="Stop at the first failing entry or continue and report all failures",
        ),
    ] = False,
) -> None:
    """
    Show the total size of all files below a remote directory.

    Example:
        ftp-tools du /pub --host ftp.example.com
    """
    try:
        with _connect(host, port, user, password, timeout, active, debug) as session:
            total_bytes = session.dir_size(path, fail_fast=fail_fast)

        typer.echo(f"Path: {path}")
        typer.echo(f"Total size: {total_bytes:,} bytes")
        typer.echo(f"Human readable: {_human_size(total_bytes)}")

    except (FtpToolsError, pydantic.ValidationError) as e:
        _report_error(e)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
