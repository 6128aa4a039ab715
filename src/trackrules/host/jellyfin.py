"""Jellyfin API client.

Implements the MediaHost and SessionCommandDispatcher interfaces against a
Jellyfin server's REST API:

- GET  /Items/{id}            item details and media streams
- GET  /Items/{id}/Ancestors  owning library (CollectionFolder)
- GET  /Sessions              active client sessions
- POST /Sessions/{id}/Command general commands (track switching)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from trackrules.config.models import HostConfig
from trackrules.domain import MediaStreamDescriptor, StreamKind
from trackrules.session.interfaces import HostItem, HostSession, SessionCommand

logger = logging.getLogger(__name__)

LIBRARY_FOLDER_TYPE = "CollectionFolder"


class HostConnectionError(Exception):
    """Raised when talking to the media server fails."""

    pass


class HostAuthError(HostConnectionError):
    """Raised when the media server rejects the API key."""

    pass


def _field(data: Mapping[str, Any], pascal: str, snake: str) -> Any:
    """Read a key in Jellyfin PascalCase, falling back to snake_case."""
    if pascal in data:
        return data[pascal]
    return data.get(snake)


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_media_stream(data: Mapping[str, Any]) -> MediaStreamDescriptor | None:
    """Map one host stream object to a MediaStreamDescriptor.

    Returns:
        The descriptor, or None when the stream has no usable index.
    """
    index = _optional_int(_field(data, "Index", "index"))
    if index is None:
        return None

    kind_label = _field(data, "Type", "type")
    return MediaStreamDescriptor(
        kind=StreamKind.from_label(str(kind_label) if kind_label else None),
        index=index,
        language=str(_field(data, "Language", "language") or ""),
        is_default=bool(_field(data, "IsDefault", "is_default")),
        is_forced=bool(_field(data, "IsForced", "is_forced")),
        channel_count=_optional_int(_field(data, "Channels", "channel_count")),
        codec=str(_field(data, "Codec", "codec") or ""),
    )


def parse_media_streams(
    items: list[Mapping[str, Any]] | None,
) -> tuple[MediaStreamDescriptor, ...]:
    """Map a list of host stream objects, dropping entries without an index."""
    streams = []
    for data in items or ():
        stream = parse_media_stream(data)
        if stream is not None:
            streams.append(stream)
    return tuple(streams)


def parse_session(data: Mapping[str, Any]) -> HostSession:
    """Map a host session object to a HostSession."""
    now_playing = data.get("NowPlayingItem") or {}
    play_state = data.get("PlayState") or {}
    return HostSession(
        id=str(data.get("Id", "")),
        user_id=data.get("UserId") or None,
        now_playing_item_id=now_playing.get("Id") or None,
        audio_stream_index=_optional_int(play_state.get("AudioStreamIndex")),
        subtitle_stream_index=_optional_int(play_state.get("SubtitleStreamIndex")),
        client=str(data.get("Client") or ""),
        device_name=str(data.get("DeviceName") or ""),
    )


def _item_streams(data: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    streams = data.get("MediaStreams")
    if streams:
        return streams
    # Some endpoints only populate streams on the first media source
    sources = data.get("MediaSources") or []
    if sources:
        return sources[0].get("MediaStreams") or []
    return []


class JellyfinClient:
    """Async HTTP client for the Jellyfin API."""

    def __init__(
        self,
        config: HostConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Connection configuration with URL and API key.
            transport: Optional transport, used by tests to stub the server.
        """
        self._base_url = config.url.rstrip("/")
        self._api_key = config.api_key
        self._timeout = config.timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers=self._headers(),
                transport=self._transport,
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        return {"X-Emby-Token": self._api_key}

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        allow_not_found: bool = False,
    ) -> httpx.Response | None:
        client = self._get_client()
        try:
            response = await client.request(method, path, params=params, json=json)
            if response.status_code == 401:
                raise HostAuthError("Invalid API key")
            if allow_not_found and response.status_code in (400, 404):
                return None
            response.raise_for_status()
            return response
        except httpx.ConnectError as e:
            raise HostConnectionError(f"Cannot connect to Jellyfin: {e}") from e
        except httpx.TimeoutException as e:
            raise HostConnectionError(f"Connection timeout: {e}") from e
        except httpx.HTTPError as e:
            raise HostConnectionError(f"HTTP error: {e}") from e

    async def _get_json(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        allow_not_found: bool = False,
    ) -> Any:
        """GET path and decode the body; None when allowed and not found."""
        response = await self._request(
            "GET", path, params=params, allow_not_found=allow_not_found
        )
        if response is None:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise HostConnectionError(f"Invalid JSON from {path}: {e}") from e

    async def get_item(
        self, item_id: str, user_id: str | None = None
    ) -> HostItem | None:
        """Fetch an item with its media streams and owning library.

        Returns:
            HostItem, or None if the server does not know the item.

        Raises:
            HostAuthError: If the API key is invalid.
            HostConnectionError: If the request fails or the reply is not JSON.
        """
        params = {"userId": user_id} if user_id else None
        data = await self._get_json(
            f"/Items/{item_id}", params=params, allow_not_found=True
        )
        if data is None:
            return None

        library_id = await self._find_library_id(item_id, user_id)
        return HostItem(
            id=str(data.get("Id", item_id)),
            name=str(data.get("Name") or ""),
            series_id=data.get("SeriesId") or None,
            library_id=library_id,
            streams=parse_media_streams(_item_streams(data)),
        )

    async def _find_library_id(
        self, item_id: str, user_id: str | None
    ) -> str | None:
        params = {"userId": user_id} if user_id else None
        ancestors = await self._get_json(
            f"/Items/{item_id}/Ancestors", params=params, allow_not_found=True
        )
        for ancestor in ancestors or []:
            if ancestor.get("Type") == LIBRARY_FOLDER_TYPE:
                return ancestor.get("Id") or None
        return None

    async def get_sessions(self) -> list[HostSession]:
        """List active sessions."""
        return [parse_session(data) for data in await self._get_json("/Sessions") or []]

    async def get_session(self, session_id: str) -> HostSession | None:
        """Find a session by id, or None if it is not active."""
        wanted = session_id.casefold()
        for session in await self.get_sessions():
            if session.id.casefold() == wanted:
                return session
        return None

    async def send_command(
        self,
        session_id: str,
        command: SessionCommand,
        index: int,
        *,
        controlling_user_id: str | None = None,
    ) -> None:
        """Send a track-switch general command to a session.

        Raises:
            HostAuthError: If the API key is invalid.
            HostConnectionError: If the command could not be delivered.
        """
        payload: dict[str, Any] = {
            "Name": command.value,
            "Arguments": {"Index": str(index)},
        }
        if controlling_user_id:
            payload["ControllingUserId"] = controlling_user_id
        await self._request("POST", f"/Sessions/{session_id}/Command", json=payload)
        logger.debug("Sent %s(%d) to session %s", command.value, index, session_id)
