"""API route modules for the Track Rules server.

- rules.py: per-user rule documents
- preview.py: dry-run resolution for an item
- sessions.py: immediate track switching and playback-start events
"""

from aiohttp import web

from trackrules.server.api.preview import setup_preview_routes
from trackrules.server.api.rules import setup_rules_routes
from trackrules.server.api.sessions import setup_session_routes

__all__ = [
    "setup_api_routes",
]


def setup_api_routes(app: web.Application) -> None:
    """Register all API routes with the application."""
    setup_rules_routes(app)
    setup_preview_routes(app)
    setup_session_routes(app)
