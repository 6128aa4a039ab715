"""Playback-start enforcement.

Usage:
    from trackrules.session import PlaybackEventBus, SessionHook

    bus = PlaybackEventBus()
    hook = SessionHook(bus, store, dispatcher)
    hook.start()
"""

from trackrules.session.events import (
    PlaybackEventBus,
    PlaybackStartEvent,
    PlaybackStartSubscriber,
)
from trackrules.session.guard import PassthroughTranscodeGuard
from trackrules.session.hook import EnforcementStatus, SessionHook
from trackrules.session.interfaces import (
    HostItem,
    HostSession,
    MediaHost,
    SessionCommand,
    SessionCommandDispatcher,
    TranscodeEvaluationContext,
    TranscodeGuard,
)

__all__ = [
    # Events
    "PlaybackEventBus",
    "PlaybackStartEvent",
    "PlaybackStartSubscriber",
    # Hook
    "SessionHook",
    "EnforcementStatus",
    # Collaborators
    "MediaHost",
    "SessionCommandDispatcher",
    "TranscodeGuard",
    "PassthroughTranscodeGuard",
    "SessionCommand",
    "HostItem",
    "HostSession",
    "TranscodeEvaluationContext",
]
