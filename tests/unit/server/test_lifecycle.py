"""Tests for ServerLifecycle."""

from trackrules.server import ServerLifecycle


class TestServerLifecycle:
    """Tests for shutdown state tracking."""

    def test_running(self):
        lifecycle = ServerLifecycle()
        assert not lifecycle.is_shutting_down
        assert lifecycle.shutdown_initiated is None
        assert lifecycle.uptime_seconds >= 0

    def test_initiate_shutdown_is_idempotent(self):
        lifecycle = ServerLifecycle(shutdown_timeout=5.0)
        lifecycle.initiate_shutdown()
        first = lifecycle.shutdown_initiated
        lifecycle.initiate_shutdown()

        assert lifecycle.is_shutting_down
        assert first is not None
        assert lifecycle.shutdown_initiated == first
