"""HTTP application for the Track Rules server.

This module builds the aiohttp Application: health check, rule and
session API routes, and the session hook that enforces rules when
playback starts.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass

from aiohttp import web

from trackrules import __version__
from trackrules.server.api import setup_api_routes
from trackrules.server.auth import create_auth_middleware, is_auth_enabled
from trackrules.server.lifecycle import ServerLifecycle
from trackrules.server.middleware import error_middleware
from trackrules.session import (
    MediaHost,
    PlaybackEventBus,
    SessionCommandDispatcher,
    SessionHook,
    TranscodeGuard,
)
from trackrules.store import RuleStore

logger = logging.getLogger(__name__)


@dataclass
class HealthStatus:
    """Health check response payload."""

    status: str
    """Overall status: 'healthy' or 'unhealthy'."""

    version: str
    """Track Rules version string."""

    uptime_seconds: float
    """Seconds since server startup."""

    host: str
    """Media server integration: 'configured' or 'not_configured'."""

    hook_active: bool
    """True while playback-start events are being enforced."""

    pending_enforcements: int = 0
    """Enforcement tasks not yet finished."""

    shutting_down: bool = False
    """True if graceful shutdown is in progress."""

    def to_dict(self) -> dict:
        return asdict(self)


def create_app(
    store: RuleStore,
    host: MediaHost | None = None,
    *,
    dispatcher: SessionCommandDispatcher | None = None,
    guard: TranscodeGuard | None = None,
    event_bus: PlaybackEventBus | None = None,
    auth_token: str | None = None,
    lifecycle: ServerLifecycle | None = None,
) -> web.Application:
    """Create and configure the aiohttp Application.

    Args:
        store: Rule store backing the API and the session hook.
        host: Media server used to look up items and sessions. Host-backed
            routes answer 503 when None.
        dispatcher: Sends track commands to sessions. Defaults to host when
            the host can also dispatch commands.
        guard: Transcode guard consulted by the session hook.
        event_bus: Bus the session hook subscribes to. A new one is created
            when None.
        auth_token: If non-empty, all endpoints except /health require HTTP
            Basic Auth with this token as the password.
        lifecycle: Server lifecycle state exposed through /health.

    Returns:
        Configured aiohttp Application instance.
    """
    app = web.Application(middlewares=[error_middleware])

    if is_auth_enabled(auth_token):
        app.middlewares.append(create_auth_middleware(auth_token))  # type: ignore[arg-type]
        logger.info("Authentication enabled for API endpoints")
    else:
        logger.warning(
            "Authentication is disabled. Set TRACKRULES_AUTH_TOKEN to protect the API."
        )

    if dispatcher is None and isinstance(host, SessionCommandDispatcher):
        dispatcher = host

    bus = event_bus if event_bus is not None else PlaybackEventBus()

    app["store"] = store
    app["host"] = host
    app["dispatcher"] = dispatcher
    app["event_bus"] = bus
    app["lifecycle"] = lifecycle if lifecycle is not None else ServerLifecycle()
    app["hook"] = (
        SessionHook(bus, store, dispatcher, guard=guard, host=host)
        if dispatcher is not None
        else None
    )

    app.router.add_get("/health", health_handler)
    setup_api_routes(app)

    app.on_startup.append(_start_session_hook)
    app.on_cleanup.append(_stop_session_hook)
    app.on_cleanup.append(_close_host)

    return app


async def _start_session_hook(app: web.Application) -> None:
    """Subscribe the session hook to playback events."""
    hook: SessionHook | None = app["hook"]
    if hook is None:
        logger.info("No media server configured; playback enforcement disabled")
        return
    hook.start()


async def _stop_session_hook(app: web.Application) -> None:
    """Unsubscribe the hook and wait for in-flight enforcement."""
    hook: SessionHook | None = app["hook"]
    if hook is None:
        return

    hook.stop()
    lifecycle: ServerLifecycle = app["lifecycle"]
    try:
        await asyncio.wait_for(hook.drain(), timeout=lifecycle.shutdown_timeout)
    except asyncio.TimeoutError:
        logger.warning(
            "%d enforcement task(s) still running after %.1fs",
            hook.pending_count,
            lifecycle.shutdown_timeout,
        )


async def _close_host(app: web.Application) -> None:
    """Close the media server client if it holds a connection pool."""
    host = app["host"]
    close = getattr(host, "close", None)
    if close is not None:
        logger.debug("Closing media server client")
        await close()


async def health_handler(request: web.Request) -> web.Response:
    """Handle GET /health requests.

    Returns 200 while running and 503 once shutdown has begun.
    """
    lifecycle: ServerLifecycle = request.app["lifecycle"]
    hook: SessionHook | None = request.app["hook"]

    shutting_down = lifecycle.is_shutting_down
    health = HealthStatus(
        status="unhealthy" if shutting_down else "healthy",
        version=__version__,
        uptime_seconds=round(lifecycle.uptime_seconds, 1),
        host="configured" if request.app["host"] is not None else "not_configured",
        hook_active=hook is not None and hook.is_started,
        pending_enforcements=hook.pending_count if hook is not None else 0,
        shutting_down=shutting_down,
    )
    return web.json_response(health.to_dict(), status=503 if shutting_down else 200)
