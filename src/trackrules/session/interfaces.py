"""Collaborator interfaces for playback enforcement.

The session hook talks to the media server only through these protocols,
so it can run against the Jellyfin HTTP client or an in-process fake.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

from trackrules.domain import MediaStreamDescriptor


class SessionCommand(str, Enum):
    """General commands understood by a playing client."""

    SET_AUDIO_STREAM_INDEX = "SetAudioStreamIndex"
    SET_SUBTITLE_STREAM_INDEX = "SetSubtitleStreamIndex"


@dataclass(frozen=True)
class HostItem:
    """A playable item with the ids rule selection needs."""

    id: str
    name: str = ""
    series_id: str | None = None
    library_id: str | None = None
    streams: tuple[MediaStreamDescriptor, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class HostSession:
    """A client session as reported by the media server."""

    id: str
    user_id: str | None = None
    now_playing_item_id: str | None = None
    # Indices currently active in the player, when known
    audio_stream_index: int | None = None
    subtitle_stream_index: int | None = None
    client: str = ""
    device_name: str = ""


@dataclass(frozen=True)
class TranscodeEvaluationContext:
    """Everything a transcode guard may inspect before commands are sent."""

    session: HostSession
    item: HostItem
    audio_stream_index: int | None
    subtitle_stream_index: int | None


@runtime_checkable
class MediaHost(Protocol):
    """Read access to the media server's items and sessions."""

    async def get_item(self, item_id: str, user_id: str | None = None) -> HostItem | None:
        """Return the item, or None if it does not exist."""
        ...

    async def get_session(self, session_id: str) -> HostSession | None:
        """Return the session, or None if it does not exist."""
        ...


@runtime_checkable
class SessionCommandDispatcher(Protocol):
    """Sends track-switch commands to a playing client."""

    async def send_command(
        self,
        session_id: str,
        command: SessionCommand,
        index: int,
        *,
        controlling_user_id: str | None = None,
    ) -> None:
        """Deliver one command on behalf of controlling_user_id.

        Raises on delivery failure.
        """
        ...


@runtime_checkable
class TranscodeGuard(Protocol):
    """Decides whether computed changes would force a worse playback path."""

    async def should_skip(self, context: TranscodeEvaluationContext) -> bool:
        """Return True to withhold the changes for this playback."""
        ...
