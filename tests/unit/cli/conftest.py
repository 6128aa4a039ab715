"""Fixtures for CLI tests."""

import pytest
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def skip_logging_setup(monkeypatch):
    """Keep the CLI from reconfiguring the root logger during tests."""
    monkeypatch.setattr("trackrules.cli._logging_configured", True)


@pytest.fixture
def runner(tmp_path):
    return CliRunner(env={"TRACKRULES_CONFIG_PATH": str(tmp_path / "absent.toml")})
