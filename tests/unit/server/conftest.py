"""Fixtures for HTTP server tests."""

import pytest

from trackrules.server import ServerLifecycle, create_app


@pytest.fixture
def lifecycle():
    return ServerLifecycle(shutdown_timeout=1.0)


@pytest.fixture
def app(rule_store, fake_host, dispatcher, lifecycle):
    """Application wired to in-memory collaborators, without auth."""
    return create_app(
        rule_store, fake_host, dispatcher=dispatcher, lifecycle=lifecycle
    )


@pytest.fixture
async def client(aiohttp_client, app):
    return await aiohttp_client(app)
