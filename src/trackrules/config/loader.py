"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to load_config)
2. Environment variables (TRACKRULES_*)
3. Config file (~/.trackrules/config.toml)
4. Default values

Environment variables:
- TRACKRULES_CONFIG_PATH: Path to config file (overrides default location)
- TRACKRULES_DATA_DIR: Directory holding per-user rule files
- TRACKRULES_SERVER_BIND / TRACKRULES_SERVER_PORT: HTTP listen address
- TRACKRULES_SHUTDOWN_TIMEOUT: Seconds to wait for pending work on shutdown
- TRACKRULES_AUTH_TOKEN: Shared secret for HTTP Basic Auth
- TRACKRULES_HOST_URL / TRACKRULES_HOST_API_KEY: Jellyfin connection
- TRACKRULES_HOST_TIMEOUT: Jellyfin request timeout in seconds
- TRACKRULES_LOG_LEVEL / TRACKRULES_LOG_FILE / TRACKRULES_LOG_FORMAT
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from trackrules.config.env import EnvReader
from trackrules.config.models import (
    DEFAULT_DATA_DIR,
    HostConfig,
    LoggingConfig,
    ServerConfig,
    StorageConfig,
    TrackRulesConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = DEFAULT_DATA_DIR / "config.toml"


def _first(*values: Any) -> Any:
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def get_default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Get the config file path, honoring TRACKRULES_CONFIG_PATH."""
    reader = EnvReader(env)
    return reader.get_path("TRACKRULES_CONFIG_PATH", DEFAULT_CONFIG_FILE)


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file. If None, uses default location.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist or
        cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def _section(file_config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = file_config.get(name)
    return value if isinstance(value, Mapping) else {}


def load_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
    *,
    bind: str | None = None,
    port: int | None = None,
    data_dir: Path | None = None,
    auth_token: str | None = None,
    host_url: str | None = None,
    host_api_key: str | None = None,
) -> TrackRulesConfig:
    """Load configuration from all sources with precedence.

    Args:
        config_path: Explicit config file. Defaults to TRACKRULES_CONFIG_PATH
            or ~/.trackrules/config.toml.
        env: Environment mapping; os.environ when None.
        bind, port, data_dir, auth_token, host_url, host_api_key: CLI
            overrides. None leaves the lower-precedence value in place.

    Returns:
        Validated TrackRulesConfig.

    Raises:
        ValueError: If any resulting value fails validation.
    """
    reader = EnvReader(env)
    if config_path is None:
        config_path = get_default_config_path(env)
    file_config = load_config_file(config_path)

    server_file = _section(file_config, "server")
    server = ServerConfig(
        bind=_first(
            bind,
            reader.get_str("TRACKRULES_SERVER_BIND"),
            server_file.get("bind"),
            ServerConfig.bind,
        ),
        port=_first(
            port,
            reader.get_int("TRACKRULES_SERVER_PORT"),
            server_file.get("port"),
            ServerConfig.port,
        ),
        shutdown_timeout=_first(
            reader.get_float("TRACKRULES_SHUTDOWN_TIMEOUT"),
            server_file.get("shutdown_timeout"),
            ServerConfig.shutdown_timeout,
        ),
        auth_token=_first(
            auth_token,
            reader.get_str("TRACKRULES_AUTH_TOKEN"),
            server_file.get("auth_token"),
        ),
    )

    storage_file = _section(file_config, "storage")
    file_data_dir = storage_file.get("data_dir")
    storage = StorageConfig(
        data_dir=_first(
            data_dir,
            reader.get_path("TRACKRULES_DATA_DIR"),
            Path(file_data_dir).expanduser() if file_data_dir else None,
            DEFAULT_DATA_DIR,
        )
    )

    logging_file = _section(file_config, "logging")
    file_log_path = logging_file.get("file")
    logging_config = LoggingConfig(
        level=_first(
            reader.get_str("TRACKRULES_LOG_LEVEL"),
            logging_file.get("level"),
            LoggingConfig.level,
        ),
        file=_first(
            reader.get_path("TRACKRULES_LOG_FILE"),
            Path(file_log_path).expanduser() if file_log_path else None,
        ),
        format=_first(
            reader.get_str("TRACKRULES_LOG_FORMAT"),
            logging_file.get("format"),
            LoggingConfig.format,
        ),
        include_stderr=_first(
            reader.get_bool("TRACKRULES_LOG_INCLUDE_STDERR"),
            logging_file.get("include_stderr"),
            LoggingConfig.include_stderr,
        ),
        max_bytes=_first(logging_file.get("max_bytes"), LoggingConfig.max_bytes),
        backup_count=_first(
            logging_file.get("backup_count"), LoggingConfig.backup_count
        ),
    )

    host_file = _section(file_config, "host")
    url = _first(host_url, reader.get_str("TRACKRULES_HOST_URL"), host_file.get("url"))
    api_key = _first(
        host_api_key,
        reader.get_str("TRACKRULES_HOST_API_KEY"),
        host_file.get("api_key"),
    )
    host: HostConfig | None = None
    if url or api_key:
        host = HostConfig(
            url=url or "",
            api_key=api_key or "",
            timeout_seconds=_first(
                reader.get_float("TRACKRULES_HOST_TIMEOUT"),
                host_file.get("timeout_seconds"),
                10.0,
            ),
        )

    return TrackRulesConfig(
        server=server,
        storage=storage,
        logging=logging_config,
        host=host,
    )
