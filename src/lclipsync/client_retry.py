#!/usr/bin/env python3
"""Client connection and retry logic for lclipsync.

This module provides connection handling with automatic retry using
tenacity for exponential backoff. Every attempt runs the discovery
chain again, so a relay that moved to another host is found after a
disconnect.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_never,
    wait_exponential,
)
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import InvalidHandshake, InvalidURI

from lclipsync.constants import INITIAL_WAIT, MAX_WAIT, OPEN_TIMEOUT, WAIT_MULTIPLIER
from lclipsync.discovery import resolve_endpoint
from lclipsync.protocol import MAX_CONTENT_SIZE
from lclipsync.sync import SyncSession, run_sync_loop

if TYPE_CHECKING:
    from lclipsync.clipboard import Clipboard
    from lclipsync.config import ClientConfig

logger = logging.getLogger(__name__)


async def connect_to_relay(url: str) -> ClientConnection:
    """Open a websocket connection to the relay.

    Args:
        url: Relay URL such as ``ws://192.168.1.5:8080``.

    Returns:
        The open connection.

    Raises:
        ConnectionError: If the connection or handshake fails.
    """
    try:
        return await connect(url, max_size=MAX_CONTENT_SIZE, open_timeout=OPEN_TIMEOUT)
    except (OSError, asyncio.TimeoutError, InvalidHandshake, InvalidURI) as e:
        raise ConnectionError(f"Failed to connect to {url}: {e}") from e


@retry(
    wait=wait_exponential(
        multiplier=WAIT_MULTIPLIER,
        min=INITIAL_WAIT,
        max=MAX_WAIT,
    ),
    retry=retry_if_exception_type((ConnectionError, OSError)),
    stop=stop_never,
    before_sleep=before_sleep_log(logger, logging.WARNING),
)
async def run_client_with_retry(config: ClientConfig, clipboard: Clipboard) -> None:
    """Discover the relay, connect and run the sync loop, with retry.

    Each attempt uses a fresh SyncSession, so the clipboard baseline is
    taken again after every reconnect.

    Args:
        config: Client configuration.
        clipboard: The local clipboard.

    Note:
        This function never returns normally - it either runs forever
        or raises an exception that doesn't trigger retry.
    """
    url = await resolve_endpoint(config)

    logger.debug("Connecting to relay at %s", url)
    try:
        connection = await connect_to_relay(url)
    except ConnectionError:
        logger.warning("Connection to %s failed, will retry", url)
        raise

    logger.info("Connected to relay at %s", url)
    try:
        await run_sync_loop(SyncSession(), clipboard, connection, config.poll_interval)
    finally:
        await connection.close()


async def run_client_connection(
    config: ClientConfig,
    clipboard: Clipboard,
    shutdown_requested: asyncio.Event,
) -> None:
    """Run the retrying client until shutdown is requested.

    Args:
        config: Client configuration.
        clipboard: The local clipboard.
        shutdown_requested: Event signaling graceful shutdown request.
    """
    client_task = asyncio.create_task(run_client_with_retry(config, clipboard))
    shutdown_task = asyncio.create_task(shutdown_requested.wait())
    try:
        done, _ = await asyncio.wait(
            {client_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED
        )
        if client_task in done:
            client_task.result()
        else:
            logger.info("Shutdown requested")
    finally:
        for task in (client_task, shutdown_task):
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
