"""Media server integration.

Usage:
    from trackrules.host import JellyfinClient

    client = JellyfinClient(config.host)
    item = await client.get_item(item_id, user_id)
"""

from trackrules.host.jellyfin import (
    HostAuthError,
    HostConnectionError,
    JellyfinClient,
    parse_media_stream,
    parse_media_streams,
    parse_session,
)

__all__ = [
    "JellyfinClient",
    "HostConnectionError",
    "HostAuthError",
    "parse_media_stream",
    "parse_media_streams",
    "parse_session",
]
