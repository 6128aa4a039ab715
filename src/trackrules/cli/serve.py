"""CLI serve command.

Runs the Track Rules HTTP API as a long-lived service suitable for
systemd or a container.
"""

from __future__ import annotations

import asyncio
import errno
import logging
import os
from pathlib import Path

import click

from trackrules.cli.exit_codes import ExitCode
from trackrules.config import TrackRulesConfig, load_config

logger = logging.getLogger(__name__)


async def run_server(config: TrackRulesConfig) -> int:
    """Run the server until SIGINT or SIGTERM.

    Returns:
        Exit code (0 for clean shutdown, non-zero for errors).
    """
    from aiohttp import web

    from trackrules.host import JellyfinClient
    from trackrules.server import ServerLifecycle, create_app
    from trackrules.server.signals import shutdown_on_signals
    from trackrules.store import JsonRuleStore

    server_config = config.server
    lifecycle = ServerLifecycle(shutdown_timeout=server_config.shutdown_timeout)
    shutdown_event = asyncio.Event()

    store = JsonRuleStore(config.storage.data_dir)
    host = JellyfinClient(config.host) if config.host is not None else None
    app = create_app(
        store,
        host,
        auth_token=server_config.auth_token,
        lifecycle=lifecycle,
    )

    runner = web.AppRunner(app)
    await runner.setup()

    with shutdown_on_signals(asyncio.get_running_loop(), lifecycle, shutdown_event):
        try:
            site = web.TCPSite(runner, server_config.bind, server_config.port)
            await site.start()

            logger.info(
                "Track Rules server started on http://%s:%d (PID %d)",
                server_config.bind,
                server_config.port,
                os.getpid(),
            )
            logger.info("Rules stored under %s", store.root)
            if host is None:
                logger.warning("No media server configured; set TRACKRULES_HOST_URL")
            logger.info("Press Ctrl+C or send SIGTERM to stop")

            await shutdown_event.wait()
            logger.info(
                "Shutdown initiated, waiting up to %.1fs for pending enforcement",
                server_config.shutdown_timeout,
            )
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                logger.error("Port %d is already in use", server_config.port)
            elif e.errno == errno.EADDRNOTAVAIL:
                logger.error("Cannot bind to address %s", server_config.bind)
            else:
                logger.error("Server error: %s", e)
            return ExitCode.SERVER_ERROR
        finally:
            await runner.cleanup()
            logger.info("Track Rules server stopped")

    return ExitCode.SUCCESS


@click.command("serve")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.trackrules/config.toml).",
)
@click.option("--bind", default=None, help="Address to bind to (default: 127.0.0.1).")
@click.option("--port", type=int, default=None, help="Port to listen on (default: 8422).")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding rule files.",
)
def serve_command(
    config_path: Path | None,
    bind: str | None,
    port: int | None,
    data_dir: Path | None,
) -> None:
    """Run the Track Rules HTTP API."""
    try:
        config = load_config(
            config_path=config_path, bind=bind, port=port, data_dir=data_dir
        )
    except ValueError as e:
        click.echo(f"Error: invalid configuration: {e}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from e

    try:
        exit_code = asyncio.run(run_server(config))
    except KeyboardInterrupt:
        exit_code = ExitCode.INTERRUPTED
    raise SystemExit(int(exit_code))
