"""Shutdown signal handling for the server process."""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trackrules.server.lifecycle import ServerLifecycle

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


@contextmanager
def shutdown_on_signals(
    loop: asyncio.AbstractEventLoop,
    lifecycle: ServerLifecycle,
    shutdown_event: asyncio.Event,
) -> Iterator[list[signal.Signals]]:
    """Route SIGTERM and SIGINT to a graceful shutdown while the block runs.

    Yields the signals that were actually installed. Loops that cannot
    take signal handlers (non-main thread, Windows) install none and the
    server can then only be stopped by KeyboardInterrupt.
    """

    def on_signal(sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down", sig.name)
        lifecycle.initiate_shutdown()
        shutdown_event.set()

    installed: list[signal.Signals] = []
    for sig in SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(sig, on_signal, sig)
        except (ValueError, RuntimeError, NotImplementedError) as e:
            logger.warning("Cannot handle %s: %s", sig.name, e)
        else:
            installed.append(sig)

    try:
        yield installed
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
