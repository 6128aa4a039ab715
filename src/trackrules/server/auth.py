"""HTTP Basic Authentication middleware.

Protects the API with a single shared token, sent as the password of an
HTTP Basic Authorization header (RFC 7617). The username is ignored.
/health stays open for load balancer and supervisor probes.
"""

from __future__ import annotations

import base64
import binascii
import logging
import secrets
from collections.abc import Awaitable, Callable

from aiohttp import web

from trackrules.server.api.errors import UNAUTHORIZED, api_error

logger = logging.getLogger(__name__)

RequestHandler = Callable[[web.Request], Awaitable[web.StreamResponse]]

UNAUTHENTICATED_PATHS = frozenset({"/health"})
_CHALLENGE = {"WWW-Authenticate": 'Basic realm="TrackRules"'}


def parse_basic_auth(auth_header: str | None) -> tuple[str, str] | None:
    """Parse an HTTP Basic Authorization header.

    Returns:
        (username, password), or None if the header is missing, malformed,
        or not Basic auth.

    Example:
        >>> parse_basic_auth("Basic dXNlcjpwYXNzd29yZA==")
        ('user', 'password')
        >>> parse_basic_auth("Bearer token123") is None
        True
    """
    if not auth_header or not auth_header.startswith("Basic "):
        return None

    try:
        decoded = base64.b64decode(auth_header[6:], validate=True).decode("utf-8")
    except (binascii.Error, ValueError, UnicodeDecodeError):
        return None

    # Split on first colon only (password may contain colons)
    if ":" not in decoded:
        return None
    username, password = decoded.split(":", 1)
    return username, password


def validate_token(provided: str, expected: str) -> bool:
    """Compare tokens in constant time."""
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def is_auth_enabled(token: str | None) -> bool:
    """Auth is enabled when the token is non-empty after stripping."""
    return token is not None and token.strip() != ""


def _unauthorized() -> web.Response:
    return api_error("Unauthorized", code=UNAUTHORIZED, status=401, headers=_CHALLENGE)


def create_auth_middleware(auth_token: str) -> Callable[..., Awaitable[web.StreamResponse]]:
    """Create auth middleware validating against auth_token."""

    @web.middleware
    async def auth_middleware(
        request: web.Request, handler: RequestHandler
    ) -> web.StreamResponse:
        if request.path in UNAUTHENTICATED_PATHS:
            return await handler(request)

        credentials = parse_basic_auth(request.headers.get("Authorization"))
        if credentials is None:
            return _unauthorized()

        _username, password = credentials
        if not validate_token(password, auth_token):
            logger.debug("Rejected request to %s: bad credentials", request.path)
            return _unauthorized()

        return await handler(request)

    return auth_middleware
