#!/usr/bin/env python3
"""Relay client connection handler.

This module provides the handler run by the websocket server for each
connected device. It registers the connection with the hub, forwards
every inbound message to the other devices and unregisters the
connection when it closes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from websockets.asyncio.server import ServerConnection

    from lclipsync.relay import RelayHub


async def handle_client(hub: RelayHub, connection: ServerConnection) -> None:
    """Handle a single device connection.

    Args:
        hub: The relay's connection set.
        connection: The websocket connection of the device.
    """
    import logging

    from websockets.exceptions import ConnectionClosed

    logger = logging.getLogger(__name__)
    logger.debug("Connection from %s", connection.remote_address)

    hub.register(connection)
    try:
        async for message in connection:
            hub.broadcast(connection, message)
        logger.debug("Client disconnected cleanly")
    except ConnectionClosed as e:
        logger.warning("Connection error: %s", e)
    finally:
        hub.unregister(connection)
