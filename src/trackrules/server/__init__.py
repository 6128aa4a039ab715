"""HTTP server for Track Rules.

Usage:
    from trackrules.server import create_app

    app = create_app(store, host=client, auth_token=token)
"""

from trackrules.server.app import create_app, health_handler
from trackrules.server.lifecycle import ServerLifecycle

__all__ = [
    "create_app",
    "health_handler",
    "ServerLifecycle",
]
