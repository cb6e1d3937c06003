"""CLI handling for lclipsync.

This module provides the command-line interface for lclipsync, handling
argument parsing via click, logging configuration, and dispatching to
relay (server) or device (client) mode based on user-specified options.
Every option can also be set through the LCLIPSYNC_* environment
variable shown in --help.

Usage:
    lclipsync --server [--host HOST] [--port PORT] [--verbose]
    lclipsync --client [--url URL] [--no-scan] [--verbose]
"""

from __future__ import annotations

import click
import sys
from typing import TYPE_CHECKING

from lclipsync.constants import (
    DEFAULT_BIND_HOST,
    DEFAULT_PORT,
    SCAN_CONCURRENCY,
    SCAN_MAX_HOSTS,
    SERVICE_NAME,
    SERVICE_TYPE,
)
from lclipsync.main_logging import configure_logging
from lclipsync.main_options import MutuallyExclusiveOption, ms_to_seconds

if TYPE_CHECKING:
    from lclipsync.config import ClientConfig, RelayConfig


@click.command(context_settings={"show_default": True})
@click.option(
    "--server",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    not_required_if=["client"],
    help="Run the relay",
)
@click.option(
    "--client",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    not_required_if=["server"],
    help="Run a syncing device",
)
@click.option(
    "--url",
    envvar="LCLIPSYNC_SERVER_URL",
    show_envvar=True,
    help="Relay URL; skips discovery (client)",
)
@click.option(
    "--port",
    type=click.IntRange(1, 65535),
    default=DEFAULT_PORT,
    envvar="LCLIPSYNC_PORT",
    show_envvar=True,
    help="Relay port",
)
@click.option(
    "--host",
    default=DEFAULT_BIND_HOST,
    envvar="LCLIPSYNC_BIND_HOST",
    show_envvar=True,
    help="Address to bind (server)",
)
@click.option(
    "--service-type",
    default=SERVICE_TYPE,
    envvar="LCLIPSYNC_SERVICE_TYPE",
    show_envvar=True,
    help="Advertisement type",
)
@click.option(
    "--service-name",
    default=SERVICE_NAME,
    envvar="LCLIPSYNC_SERVICE_NAME",
    show_envvar=True,
    help="Advertisement instance name (server)",
)
@click.option(
    "--discovery-timeout",
    type=click.IntRange(min=1),
    default=7000,
    callback=ms_to_seconds,
    envvar="LCLIPSYNC_DISCOVERY_TIMEOUT_MS",
    show_envvar=True,
    help="Advertisement lookup timeout in ms (client)",
)
@click.option(
    "--requery-interval",
    type=click.IntRange(min=1),
    default=1000,
    callback=ms_to_seconds,
    envvar="LCLIPSYNC_REQUERY_INTERVAL_MS",
    show_envvar=True,
    help="Interval between browse queries in ms (client)",
)
@click.option(
    "--scan/--no-scan",
    default=True,
    envvar="LCLIPSYNC_SCAN",
    show_envvar=True,
    help="Probe local subnets when no advertisement answers (client)",
)
@click.option(
    "--scan-timeout",
    type=click.IntRange(min=1),
    default=350,
    callback=ms_to_seconds,
    envvar="LCLIPSYNC_SCAN_TIMEOUT_MS",
    show_envvar=True,
    help="Per-host connect timeout in ms (client)",
)
@click.option(
    "--scan-max-hosts",
    type=click.IntRange(min=1),
    default=SCAN_MAX_HOSTS,
    envvar="LCLIPSYNC_SCAN_MAX_HOSTS",
    show_envvar=True,
    help="Skip subnets with more hosts than this (client)",
)
@click.option(
    "--scan-concurrency",
    type=click.IntRange(min=1),
    default=SCAN_CONCURRENCY,
    envvar="LCLIPSYNC_SCAN_CONCURRENCY",
    show_envvar=True,
    help="Maximum probes in flight (client)",
)
@click.option(
    "--poll-interval",
    type=click.IntRange(min=1),
    default=1000,
    callback=ms_to_seconds,
    envvar="LCLIPSYNC_POLL_INTERVAL_MS",
    show_envvar=True,
    help="Clipboard poll interval in ms (client)",
)
@click.option(
    "--verbose",
    is_flag=True,
    envvar="LCLIPSYNC_VERBOSE",
    help="Enable DEBUG-level logging",
)
def main(
    server: bool,
    client: bool,
    url: str | None,
    port: int,
    host: str,
    service_type: str,
    service_name: str,
    discovery_timeout: float,
    requery_interval: float,
    scan: bool,
    scan_timeout: float,
    scan_max_hosts: int,
    scan_concurrency: int,
    poll_interval: float,
    verbose: bool,
) -> None:
    """Share one clipboard between machines on the local network."""
    if not server and not client:
        raise click.UsageError("Either --server or --client must be specified")

    configure_logging(verbose)

    from lclipsync.config import ClientConfig, RelayConfig

    if server:
        config = RelayConfig(
            host=host,
            port=port,
            service_name=service_name,
            service_type=service_type,
        )
    else:
        config = ClientConfig(
            server_url=url or None,
            port=port,
            service_type=service_type,
            discovery_timeout=discovery_timeout,
            requery_interval=requery_interval,
            scan_enabled=scan,
            scan_timeout=scan_timeout,
            scan_max_hosts=scan_max_hosts,
            scan_concurrency=scan_concurrency,
            poll_interval=poll_interval,
        )

    _run_mode(server, config)


def _run_mode(server: bool, config: RelayConfig | ClientConfig) -> None:
    """Run the appropriate mode (server or client).

    Args:
        server: True for relay mode, False for client mode.
        config: RelayConfig or ClientConfig for the chosen mode.
    """
    import asyncio
    from lclipsync.client import run_client
    from lclipsync.server import RelayBindError, run_server

    try:
        if server:
            asyncio.run(run_server(config))
        else:
            asyncio.run(run_client(config))
    except (RelayBindError, ConnectionError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
