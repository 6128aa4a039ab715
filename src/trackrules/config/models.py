"""Configuration models for Track Rules.

All sections validate themselves in __post_init__ and raise ValueError on
bad values, so a config that constructs is a config that can be used.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_DATA_DIR = Path.home() / ".trackrules"


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for the HTTP API server (`trackrules serve`)."""

    bind: str = "127.0.0.1"
    """Network address to bind to. Default localhost."""

    port: int = 8422
    """Port number for the HTTP server."""

    shutdown_timeout: float = 10.0
    """Seconds to wait for pending enforcement during shutdown."""

    auth_token: str | None = None
    """Shared secret for HTTP Basic Auth. None or empty disables authentication."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be 1-65535, got {self.port}")
        if self.shutdown_timeout <= 0:
            raise ValueError(
                f"shutdown_timeout must be positive, got {self.shutdown_timeout}"
            )


@dataclass(frozen=True)
class StorageConfig:
    """Where per-user rule files live."""

    data_dir: Path = DEFAULT_DATA_DIR


@dataclass(frozen=True)
class HostConfig:
    """Connection to the Jellyfin server whose sessions are controlled."""

    url: str
    """Base URL of the server (e.g., "http://localhost:8096")."""

    api_key: str
    """API key created under Dashboard > API Keys."""

    timeout_seconds: float = 10.0
    """Request timeout in seconds (1-300)."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.url.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        if not self.api_key or not self.api_key.strip():
            raise ValueError("API key is required")
        if " " in self.api_key:
            raise ValueError("API key must not contain whitespace")
        if not 1 <= self.timeout_seconds <= 300:
            raise ValueError("Timeout must be between 1 and 300 seconds")


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if self.backup_count < 0:
            raise ValueError(
                f"backup_count must be non-negative, got {self.backup_count}"
            )


@dataclass(frozen=True)
class TrackRulesConfig:
    """Main configuration container. Aggregates all sections."""

    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    # None when no media server is configured; host-backed routes are disabled
    host: HostConfig | None = None
