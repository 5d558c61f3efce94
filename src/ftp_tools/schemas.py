"""Connection configuration schemas for ftp-tools."""

from pydantic import BaseModel, Field

from ftp_tools.core import settings


class FtpConnectionConfig(BaseModel):
    """Configuration for one FTP server connection."""
    host: str = Field(..., min_length=1, description="FTP server hostname")
    port: int = Field(
        default=settings.default_port, ge=1, le=65535, description="FTP control port"
    )
    user: str = Field(default="anonymous", description="FTP username")
    password: str | None = Field(
        default=None,
        description="FTP password; the configured anonymous password when unset",
    )
    timeout: int = Field(
        default=settings.default_timeout, gt=0, description="Timeout in seconds"
    )
    passive: bool = Field(
        default=settings.passive, description="Use passive mode data connections"
    )
