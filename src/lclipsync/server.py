#!/usr/bin/env python3
"""Relay mode implementation for lclipsync.

The relay listens for websocket connections from devices on the local
network. Every clipboard message received from one device is forwarded
to all other connected devices. The relay:
- Advertises itself via DNS-SD so devices can find it without settings
- Withdraws the advertisement and exits cleanly on SIGINT/SIGTERM
- Treats a failure to bind its port as fatal

Usage:
    lclipsync --server [--host HOST] [--port PORT]
"""

from __future__ import annotations

import asyncio
import logging
import signal
from functools import partial
from typing import TYPE_CHECKING

from websockets.asyncio.server import serve

from lclipsync.advertisement import ServiceAdvertiser
from lclipsync.protocol import MAX_CONTENT_SIZE
from lclipsync.relay import RelayHub
from lclipsync.server_handler import handle_client
from lclipsync.server_socket import advertised_addresses, print_startup_message

if TYPE_CHECKING:
    from lclipsync.config import RelayConfig

logger = logging.getLogger(__name__)


class RelayBindError(Exception):
    """The relay could not listen on its configured address."""


async def run_server(
    config: RelayConfig,
    shutdown_requested: asyncio.Event | None = None,
) -> None:
    """Run the relay until shutdown is requested.

    Args:
        config: Relay configuration.
        shutdown_requested: Event that stops the relay when set. When
            omitted, SIGINT and SIGTERM set it.

    Raises:
        RelayBindError: If the listening socket cannot be bound.
    """
    hub = RelayHub()
    try:
        server = await serve(
            partial(handle_client, hub),
            config.host,
            config.port,
            max_size=MAX_CONTENT_SIZE,
        )
    except OSError as e:
        raise RelayBindError(f"Cannot listen on {config.host}:{config.port}: {e}") from e

    addresses = advertised_addresses(config.host)
    print_startup_message(config.host, config.port, addresses)

    installed_signals = False
    if shutdown_requested is None:
        shutdown_requested = asyncio.Event()
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(signal.SIGINT, shutdown_requested.set)
        loop.add_signal_handler(signal.SIGTERM, shutdown_requested.set)
        installed_signals = True

    advertiser = ServiceAdvertiser(
        config.service_name, config.service_type, config.port, addresses
    )
    async with server:
        await advertiser.publish()
        try:
            await shutdown_requested.wait()
            logger.info("Shutdown requested")
        finally:
            await advertiser.retract()
            if installed_signals:
                loop.remove_signal_handler(signal.SIGINT)
                loop.remove_signal_handler(signal.SIGTERM)
    logger.info("Relay stopped")
