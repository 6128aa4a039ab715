"""Error-handling middleware.

Turns anything a handler lets escape into the API's JSON error envelope,
so clients never see aiohttp's plain-text error pages.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from aiohttp import web

from trackrules.server.api.errors import INTERNAL_ERROR, NOT_FOUND, api_error

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def error_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Map HTTP exceptions and unexpected errors to JSON responses."""
    try:
        return await handler(request)
    except web.HTTPException as e:
        if e.status < 400:
            raise
        code = NOT_FOUND if e.status == 404 else f"HTTP_{e.status}"
        return api_error(e.reason, code=code, status=e.status)
    except Exception:
        logger.exception("Unhandled error in %s %s", request.method, request.path)
        return api_error("Internal server error", code=INTERNAL_ERROR, status=500)
