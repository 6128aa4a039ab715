"""Shared test fixtures for Track Rules."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from trackrules.domain import (
    MediaStreamDescriptor,
    RuleScope,
    StreamKind,
    SubtitleMode,
    TrackRule,
)
from trackrules.host import HostConnectionError
from trackrules.session import HostItem, HostSession, SessionCommand
from trackrules.store import JsonRuleStore

USER_ID = "6f1c2a9e4b7d4e0f9a3c5d7e8f901234"
SERIES_ID = "a1b2c3d4e5f60718293a4b5c6d7e8f90"
LIBRARY_ID = "0f9e8d7c6b5a49382716a5b4c3d2e1f0"


class FakeMediaHost:
    """In-memory MediaHost."""

    def __init__(self) -> None:
        self.items: dict[str, HostItem] = {}
        self.sessions: dict[str, HostSession] = {}
        self.error: HostConnectionError | None = None
        self.item_requests: list[tuple[str, str | None]] = []

    def add_item(self, item: HostItem) -> HostItem:
        self.items[item.id] = item
        return item

    def add_session(self, session: HostSession) -> HostSession:
        self.sessions[session.id] = session
        return session

    async def get_item(self, item_id: str, user_id: str | None = None) -> HostItem | None:
        self.item_requests.append((item_id, user_id))
        if self.error is not None:
            raise self.error
        return self.items.get(item_id)

    async def get_session(self, session_id: str) -> HostSession | None:
        if self.error is not None:
            raise self.error
        for session in self.sessions.values():
            if session.id.casefold() == session_id.casefold():
                return session
        return None


class RecordingDispatcher:
    """SessionCommandDispatcher that records every command."""

    def __init__(self) -> None:
        self.commands: list[tuple[str, SessionCommand, int]] = []
        self.controlling_users: list[str | None] = []
        self.error: Exception | None = None

    async def send_command(
        self,
        session_id: str,
        command: SessionCommand,
        index: int,
        *,
        controlling_user_id: str | None = None,
    ) -> None:
        if self.error is not None:
            raise self.error
        self.commands.append((session_id, command, index))
        self.controlling_users.append(controlling_user_id)


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def series_id() -> str:
    return SERIES_ID


@pytest.fixture
def library_id() -> str:
    return LIBRARY_ID


@pytest.fixture
def scenario_streams() -> list[MediaStreamDescriptor]:
    """Two audio and two subtitle streams.

    #0 eng default 2ch aac, #1 jpn 6ch dts, #2 eng forced subtitle,
    #3 eng full subtitle.
    """
    return [
        MediaStreamDescriptor(
            kind=StreamKind.AUDIO,
            index=0,
            language="eng",
            is_default=True,
            channel_count=2,
            codec="aac",
        ),
        MediaStreamDescriptor(
            kind=StreamKind.AUDIO,
            index=1,
            language="jpn",
            channel_count=6,
            codec="dts",
        ),
        MediaStreamDescriptor(
            kind=StreamKind.SUBTITLE,
            index=2,
            language="eng",
            is_forced=True,
        ),
        MediaStreamDescriptor(
            kind=StreamKind.SUBTITLE,
            index=3,
            language="eng",
        ),
    ]


@pytest.fixture
def make_rule() -> Callable[..., TrackRule]:
    """Factory for rules taking list preferences."""

    def _make(
        scope: RuleScope = RuleScope.GLOBAL,
        target_id: str | None = None,
        audio: list[str] | None = None,
        subs: list[str] | None = None,
        mode: SubtitleMode = SubtitleMode.DEFAULT,
        suppress_transcode: bool = False,
        enabled: bool = True,
    ) -> TrackRule:
        return TrackRule(
            scope=scope,
            target_id=target_id,
            audio_preferences=tuple(audio if audio is not None else ["any"]),
            subtitle_preferences=tuple(subs if subs is not None else ["none"]),
            subtitle_mode=mode,
            suppress_transcode=suppress_transcode,
            enabled=enabled,
        )

    return _make


@pytest.fixture
def rule_store(tmp_path) -> JsonRuleStore:
    """JsonRuleStore rooted in a temporary directory."""
    return JsonRuleStore(tmp_path)


@pytest.fixture
def fake_host() -> FakeMediaHost:
    return FakeMediaHost()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()
