"""Tests for session logging context."""

import asyncio
import logging

from trackrules.logging.context import (
    SessionContextFilter,
    clear_session_context,
    get_session_context,
    session_context,
    set_session_context,
)


def _filtered_record():
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "m", (), None)
    SessionContextFilter().filter(record)
    return record


class TestSessionContext:
    """Tests for the contextvar helpers."""

    def test_set_and_clear(self):
        set_session_context("s", "u")
        assert get_session_context() == ("s", "u")
        clear_session_context()
        assert get_session_context() == (None, None)

    def test_context_manager_restores_previous(self):
        with session_context("outer", "u1"):
            with session_context("inner", "u2"):
                assert get_session_context() == ("inner", "u2")
            assert get_session_context() == ("outer", "u1")
        assert get_session_context() == (None, None)

    async def test_tasks_do_not_share_context(self):
        seen = {}

        async def handle(session_id):
            with session_context(session_id, "user"):
                await asyncio.sleep(0)
                seen[session_id] = get_session_context()[0]

        await asyncio.gather(handle("a"), handle("b"))

        assert seen == {"a": "a", "b": "b"}


class TestSessionContextFilter:
    """Tests for SessionContextFilter."""

    def test_without_context(self):
        record = _filtered_record()
        assert record.session_id is None
        assert record.session_tag == ""

    def test_tag_is_truncated(self):
        with session_context("0123456789abcdef", "fedcba9876543210"):
            record = _filtered_record()
        assert record.session_tag == "[S:01234567 U:fedcba98] "
        assert record.user_id == "fedcba9876543210"

    def test_session_only(self):
        with session_context("abc"):
            record = _filtered_record()
        assert record.session_tag == "[S:abc] "
