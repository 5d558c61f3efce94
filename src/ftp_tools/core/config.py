"""Configuration management for ftp-tools."""

from pydantic_settings import BaseSettings

DEFAULT_TEXT_EXTENSIONS = [
    "asp",
    "bat",
    "c",
    "ccp",
    "csv",
    "h",
    "htm",
    "html",
    "shtml",
    "ini",
    "log",
    "php",
    "pl",
    "perl",
    "sh",
    "sql",
    "txt",
    "cgi",
    "lock",
    "json",
    "xml",
    "yml",
]


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    otel_enabled: bool = False
    otel_service_name: str = "ftp-tools"
    otel_exporter_endpoint: str = "http://localhost:4317"

    debug: bool = False
    anonymous_password: str = "anonymous@example.com"
    default_port: int = 21
    default_timeout: int = 30
    passive: bool = True
    text_extensions: list[str] = DEFAULT_TEXT_EXTENSIONS

    model_config = {
        "env_prefix": "FTP_TOOLS_",
        "case_sensitive": False,
    }


settings = Settings()
