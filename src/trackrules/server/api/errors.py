"""JSON error envelope for the Track Rules API.

Every failed request answers with the same body:

    {"error": "Session not found.", "code": "NOT_FOUND"}

plus an optional ``details`` member (field errors, host failure reason).
Clients should branch on ``code`` and show ``error`` to people.
"""

from __future__ import annotations

from typing import Any

from aiohttp import web

# Request problems (4xx)
INVALID_REQUEST = "INVALID_REQUEST"
INVALID_JSON = "INVALID_JSON"
VALIDATION_FAILED = "VALIDATION_FAILED"
INVALID_ID_FORMAT = "INVALID_ID_FORMAT"
NOT_FOUND = "NOT_FOUND"
UNAUTHORIZED = "UNAUTHORIZED"

# Server-side problems (5xx)
INTERNAL_ERROR = "INTERNAL_ERROR"
STORAGE_ERROR = "STORAGE_ERROR"
HOST_UNAVAILABLE = "HOST_UNAVAILABLE"
SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class ApiError(Exception):
    """A request that cannot be served, carrying its error envelope.

    Request helpers raise it; handlers catch it and return ``response()``.
    """

    def __init__(
        self, message: str, *, code: str, status: int = 400, details: Any = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.details = details

    def response(self) -> web.Response:
        return api_error(
            self.message, code=self.code, status=self.status, details=self.details
        )


def api_error(
    message: str,
    *,
    code: str,
    status: int = 400,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> web.Response:
    """Return a JSON error response; details is omitted when None."""
    body: dict[str, Any] = {"error": message, "code": code}
    if details is not None:
        body["details"] = details
    return web.json_response(body, status=status, headers=headers)
