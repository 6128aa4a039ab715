"""Root logger setup from LoggingConfig.

configure_logging() may run more than once per process. Each call swaps out
the handlers a previous call installed and leaves any other handlers on the
root logger alone.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from trackrules.logging.context import SessionContextFilter
from trackrules.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from trackrules.config.models import LoggingConfig

# "[S:3f2a1b0c U:9c1d2e3f] " prefix comes from SessionContextFilter.
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(session_tag)s%(name)s: %(message)s"
TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# Per-request INFO lines from the HTTP stacks drown out enforcement logs.
CHATTY_LOGGERS = ("httpx", "httpcore", "aiohttp.access")

_OWNED_ATTR = "_trackrules_handler"


def configure_logging(config: LoggingConfig) -> None:
    """Route all logging through the handlers LoggingConfig asks for.

    A rotating file handler is used when ``config.file`` is set; stderr is
    used when requested or when there is no usable file. Every handler
    gets the session context filter so text and JSON output both carry
    the playback being enforced.
    """
    level = logging.getLevelName(config.level.upper())
    root = logging.getLogger()
    root.setLevel(level)

    for handler in [h for h in root.handlers if getattr(h, _OWNED_ATTR, False)]:
        root.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = []
    if config.file is not None:
        file_handler = _open_file_handler(Path(config.file).expanduser(), config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = _formatter_for(config.format)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(SessionContextFilter())
        setattr(handler, _OWNED_ATTR, True)
        root.addHandler(handler)

    quiet_level = logging.DEBUG if level == logging.DEBUG else logging.WARNING
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def _formatter_for(fmt: str) -> logging.Formatter:
    if fmt.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def _open_file_handler(
    path: Path, config: LoggingConfig
) -> RotatingFileHandler | None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        # Logging is not up yet, so report straight to stderr.
        print(f"Warning: cannot open log file {path}: {e}", file=sys.stderr)
        return None
