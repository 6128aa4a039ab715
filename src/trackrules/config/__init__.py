"""Configuration for Track Rules.

Usage:
    from trackrules.config import load_config

    config = load_config()
    print(config.server.port)
"""

from trackrules.config.env import EnvReader
from trackrules.config.loader import (
    DEFAULT_CONFIG_FILE,
    get_default_config_path,
    load_config,
    load_config_file,
)
from trackrules.config.logging_factory import (
    build_logging_config,
    configure_logging_from_cli,
)
from trackrules.config.models import (
    DEFAULT_DATA_DIR,
    HostConfig,
    LoggingConfig,
    ServerConfig,
    StorageConfig,
    TrackRulesConfig,
)

__all__ = [
    "EnvReader",
    "load_config",
    "load_config_file",
    "get_default_config_path",
    "build_logging_config",
    "configure_logging_from_cli",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_DATA_DIR",
    "TrackRulesConfig",
    "ServerConfig",
    "StorageConfig",
    "HostConfig",
    "LoggingConfig",
]
