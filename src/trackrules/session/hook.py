"""Playback-start enforcement.

SessionHook listens for playback-start events, resolves the user's rules
against the item being played and tells the client to switch tracks.
Handling is fire-and-forget: the publisher never waits for enforcement and
never sees its failures.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from trackrules.logging import session_context
from trackrules.resolver import ResolutionContext, ResolutionResult, resolve
from trackrules.session.events import PlaybackEventBus, PlaybackStartEvent
from trackrules.session.guard import PassthroughTranscodeGuard
from trackrules.session.interfaces import (
    HostItem,
    HostSession,
    MediaHost,
    SessionCommand,
    SessionCommandDispatcher,
    TranscodeEvaluationContext,
    TranscodeGuard,
)
from trackrules.store import RuleStore

logger = logging.getLogger(__name__)


class EnforcementStatus(Enum):
    """Outcome of handling one playback-start event."""

    SKIPPED = "skipped"
    NO_STREAMS = "no_streams"
    NO_RULES = "no_rules"
    NO_CHANGE = "no_change"
    SUPPRESSED = "suppressed"
    APPLIED = "applied"
    FAILED = "failed"


class SessionHook:
    """Applies track rules when playback starts.

    Call start() to subscribe to the event bus and stop() to unsubscribe;
    both are idempotent.
    """

    def __init__(
        self,
        event_bus: PlaybackEventBus,
        store: RuleStore,
        dispatcher: SessionCommandDispatcher,
        guard: TranscodeGuard | None = None,
        host: MediaHost | None = None,
    ) -> None:
        self._event_bus = event_bus
        self._store = store
        self._dispatcher = dispatcher
        self._guard = guard if guard is not None else PassthroughTranscodeGuard()
        self._host = host
        self._started = False
        self._pending: set[asyncio.Task[EnforcementStatus]] = set()

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def start(self) -> None:
        """Subscribe to playback-start events."""
        if self._started:
            return
        self._event_bus.subscribe(self.on_playback_start)
        self._started = True
        logger.info("Track rules session hook started")

    def stop(self) -> None:
        """Unsubscribe from playback-start events."""
        if not self._started:
            return
        self._event_bus.unsubscribe(self.on_playback_start)
        self._started = False
        logger.info("Track rules session hook stopped")

    def on_playback_start(self, event: PlaybackStartEvent) -> None:
        """Event bus callback: schedule enforcement without waiting for it."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Playback start received outside an event loop; ignored")
            return

        task = loop.create_task(self.handle_playback_start(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for every scheduled enforcement task to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def handle_playback_start(
        self, event: PlaybackStartEvent
    ) -> EnforcementStatus:
        """Resolve and apply rules for one playback.

        Never raises: failures are logged and reported as FAILED.
        """
        session = event.session
        if session is None or not session.user_id:
            return EnforcementStatus.SKIPPED

        with session_context(session.id, session.user_id):
            try:
                return await self._enforce(session, session.user_id, event.item)
            except Exception:
                logger.exception("Track rules enforcement failed")
                return EnforcementStatus.FAILED

    async def _enforce(
        self, session: HostSession, user_id: str, item: HostItem | None
    ) -> EnforcementStatus:
        if item is None:
            item = await self._lookup_item(session)
        if item is None or not item.streams:
            logger.debug("No media streams for playback; nothing to do")
            return EnforcementStatus.NO_STREAMS

        rule_set = await self._store.get(user_id)
        if not rule_set.enabled_rules:
            logger.debug("User has no enabled track rules")
            return EnforcementStatus.NO_RULES

        context = ResolutionContext(
            user_id=user_id,
            series_id=item.series_id,
            library_id=item.library_id,
            media_streams=item.streams,
            current_audio_stream_index=session.audio_stream_index,
            current_subtitle_stream_index=session.subtitle_stream_index,
        )
        result = resolve(rule_set, context)
        if not result.has_changes:
            logger.debug("Active tracks already satisfy rules for item %s", item.id)
            return EnforcementStatus.NO_CHANGE

        if result.applied_rule is not None and result.applied_rule.suppress_transcode:
            guard_context = TranscodeEvaluationContext(
                session=session,
                item=item,
                audio_stream_index=result.audio_stream_index,
                subtitle_stream_index=result.subtitle_stream_index,
            )
            if await self._guard.should_skip(guard_context):
                logger.info(
                    "Skipping track changes for item %s to avoid a transcode", item.id
                )
                return EnforcementStatus.SUPPRESSED

        await self._dispatch(session.id, user_id, result)
        logger.info(
            "Applied %s track rule to item %s: audio=%s, subtitle=%s",
            result.scope.name.lower() if result.scope is not None else "unknown",
            item.id,
            result.audio_stream_index,
            result.subtitle_stream_index,
        )
        return EnforcementStatus.APPLIED

    async def _lookup_item(self, session: HostSession) -> HostItem | None:
        if self._host is None or not session.now_playing_item_id:
            return None
        return await self._host.get_item(session.now_playing_item_id, session.user_id)

    async def _dispatch(
        self, session_id: str, user_id: str, result: ResolutionResult
    ) -> None:
        if result.audio_stream_index is not None:
            await self._dispatcher.send_command(
                session_id,
                SessionCommand.SET_AUDIO_STREAM_INDEX,
                result.audio_stream_index,
                controlling_user_id=user_id,
            )
        if result.subtitle_stream_index is not None:
            await self._dispatcher.send_command(
                session_id,
                SessionCommand.SET_SUBTITLE_STREAM_INDEX,
                result.subtitle_stream_index,
                controlling_user_id=user_id,
            )
