"""Playback event bus.

A minimal in-process publish/subscribe channel for playback-start
notifications. Publishing never raises because of a subscriber.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from trackrules.session.interfaces import HostItem, HostSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackStartEvent:
    """Raised when a client starts playing an item.

    item may be None when the notifier only knows the item id; the session's
    now_playing_item_id is then used to look it up.
    """

    session: HostSession | None
    item: HostItem | None = None


PlaybackStartSubscriber = Callable[[PlaybackStartEvent], None]


class PlaybackEventBus:
    """Fan-out of playback-start events to registered subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[PlaybackStartSubscriber] = []

    def subscribe(self, subscriber: PlaybackStartSubscriber) -> None:
        """Register a subscriber. Registering the same callable twice is a no-op."""
        if subscriber not in self._subscribers:
            self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: PlaybackStartSubscriber) -> None:
        """Remove a subscriber if registered."""
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: PlaybackStartEvent) -> int:
        """Deliver event to every subscriber.

        Returns:
            Number of subscribers that accepted the event without raising.
        """
        delivered = 0
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception:
                logger.exception("Playback subscriber %r failed", subscriber)
            else:
                delivered += 1
        return delivered
