"""Command-line interface for Track Rules."""

import logging
from pathlib import Path

import click

from trackrules import __version__

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from CLI options, once per process."""
    global _logging_configured
    if _logging_configured:
        return

    from trackrules.config.logging_factory import configure_logging_from_cli

    configure_logging_from_cli(
        level=log_level,
        file=log_file,
        format="json" if log_json else None,
    )
    _logging_configured = True


@click.group()
@click.version_option(version=__version__, prog_name="trackrules")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Track Rules - per-user audio and subtitle track selection for Jellyfin."""
    ctx.ensure_object(dict)
    try:
        _configure_logging(log_level, log_file, log_json)
    except ValueError as e:
        from trackrules.cli.exit_codes import ExitCode

        click.echo(f"Error: invalid logging configuration: {e}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from e


# Defer import to avoid circular dependency
def _register_commands():
    from trackrules.cli.resolve import resolve_command
    from trackrules.cli.rules import rules_group
    from trackrules.cli.serve import serve_command

    main.add_command(resolve_command)
    main.add_command(rules_group)
    main.add_command(serve_command)


_register_commands()
