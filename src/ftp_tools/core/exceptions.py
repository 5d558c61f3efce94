"""Exception hierarchy for ftp-tools."""


class FtpToolsError(Exception):
    """Base exception for all ftp-tools errors."""

    pass


class ValidationError(FtpToolsError):
    """Raised when validation fails."""

    pass


class FtpConnectionError(FtpToolsError):
    """Raised when the control connection cannot be established."""

    pass


class AuthenticationError(FtpToolsError):
    """Raised when the server rejects the credentials."""

    pass


class SessionError(FtpToolsError):
    """Raised when an operation is attempted without a live session."""

    pass


class ListingError(FtpToolsError):
    """Raised when a directory listing cannot be retrieved."""

    pass


class RemoteOperationError(FtpToolsError):
    """Raised when a single remote command fails."""

    pass


class LocalIOError(FtpToolsError):
    """Raised when a local filesystem precondition or mutation fails."""

    pass


class NotADirectoryError(FtpToolsError):
    """Raised when a path expected to be a directory is not one."""

    pass


class PartialTreeError(FtpToolsError):
    """Raised when a best-effort tree operation finished with failures.

    Attributes:
        failures: One TreeFailure per entry that could not be processed
    """

    def __init__(self, message: str, failures=None):
        super().__init__(message)
        self.failures = list(failures or [])
