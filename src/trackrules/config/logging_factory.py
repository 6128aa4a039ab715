"""Merge command-line logging flags into the configured LoggingConfig."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from trackrules.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Return a copy of base with every non-None override applied.

    Rotation settings only come from the config file. The copy is
    re-validated, so a bad level or format raises ValueError.
    """
    overrides = {
        name: value
        for name, value in (
            ("level", level),
            ("file", file),
            ("format", format),
            ("include_stderr", include_stderr),
        )
        if value is not None
    }
    return replace(base, **overrides)


def configure_logging_from_cli(
    *,
    config_path: Path | None = None,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Load the config file, layer CLI flags on top and install handlers."""
    from trackrules.config.loader import load_config
    from trackrules.logging import configure_logging

    effective = build_logging_config(
        load_config(config_path=config_path).logging,
        level=level,
        file=file,
        format=format,
        include_stderr=include_stderr,
    )
    configure_logging(effective)
    return effective
