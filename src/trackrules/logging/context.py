"""Session context for structured logging.

Playback enforcement runs as many small concurrent tasks. The session and
user being handled are carried in contextvars so every log record emitted
while handling one playback can be attributed to it.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_session_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "session_id", default=None
)
_user_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "user_id", default=None
)


def set_session_context(session_id: str | None, user_id: str | None = None) -> None:
    """Set the current session context."""
    _session_id.set(session_id)
    _user_id.set(user_id)


def clear_session_context() -> None:
    """Clear the current session context."""
    _session_id.set(None)
    _user_id.set(None)


@contextmanager
def session_context(
    session_id: str | None,
    user_id: str | None = None,
) -> Generator[None, None, None]:
    """Context manager for playback handling context.

    Sets session context on entry and restores the previous values on exit.

    Example:
        with session_context(session.id, session.user_id):
            logger.info("Applying rules")  # Automatically includes context
    """
    old_session_id = _session_id.get()
    old_user_id = _user_id.get()
    try:
        set_session_context(session_id, user_id)
        yield
    finally:
        _session_id.set(old_session_id)
        _user_id.set(old_user_id)


def get_session_context() -> tuple[str | None, str | None]:
    """Get current session context as (session_id, user_id)."""
    return _session_id.get(), _user_id.get()


class SessionContextFilter(logging.Filter):
    """Logging filter that injects session context into log records.

    Adds session_id and user_id attributes, plus a compact session_tag such
    as "[S:3f2a U:9c1d] " for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        session_id, user_id = get_session_context()

        record.session_id = session_id
        record.user_id = user_id

        parts = []
        if session_id:
            parts.append(f"S:{session_id[:8]}")
        if user_id:
            parts.append(f"U:{user_id[:8]}")
        record.session_tag = f"[{' '.join(parts)}] " if parts else ""

        return True  # Never filter out records
