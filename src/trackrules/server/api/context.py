"""Access to application-scoped collaborators from request handlers."""

from __future__ import annotations

import logging

from aiohttp import web

from trackrules.host import HostAuthError, HostConnectionError
from trackrules.server.api.errors import (
    HOST_UNAVAILABLE,
    SERVICE_UNAVAILABLE,
    ApiError,
    api_error,
)
from trackrules.session import MediaHost, SessionCommandDispatcher

logger = logging.getLogger(__name__)

_NO_HOST = "No media server is configured"


def require_host(request: web.Request) -> MediaHost:
    """Return the configured media host.

    Raises:
        ApiError: 503 when no media server is configured.
    """
    host: MediaHost | None = request.app.get("host")
    if host is None:
        raise ApiError(_NO_HOST, code=SERVICE_UNAVAILABLE, status=503)
    return host


def require_dispatcher(request: web.Request) -> SessionCommandDispatcher:
    """Return the session command dispatcher, raising a 503 ApiError if absent."""
    dispatcher: SessionCommandDispatcher | None = request.app.get("dispatcher")
    if dispatcher is None:
        raise ApiError(_NO_HOST, code=SERVICE_UNAVAILABLE, status=503)
    return dispatcher


def host_unavailable(error: HostConnectionError) -> web.Response:
    """Map a host failure to a 502 response."""
    logger.warning("Media server request failed: %s", error)
    reason = "authentication" if isinstance(error, HostAuthError) else "connection"
    return api_error(
        "Media server request failed",
        code=HOST_UNAVAILABLE,
        status=502,
        details={"reason": reason, "message": str(error)},
    )
