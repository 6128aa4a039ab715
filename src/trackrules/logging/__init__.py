"""Structured logging for Track Rules.

Provides configurable logging with JSON format support and file rotation,
plus per-playback session context injected into every record.
"""

from trackrules.logging.config import configure_logging
from trackrules.logging.context import (
    SessionContextFilter,
    clear_session_context,
    get_session_context,
    session_context,
    set_session_context,
)
from trackrules.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "SessionContextFilter",
    "clear_session_context",
    "configure_logging",
    "get_session_context",
    "session_context",
    "set_session_context",
]
