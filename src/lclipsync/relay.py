#!/usr/bin/env python3
"""Connection set and fan-out for the broadcast relay.

Every message from one connection is forwarded unchanged to all other
connections open at that moment. Nothing is buffered for connections
that join later.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from websockets.asyncio.server import broadcast

if TYPE_CHECKING:
    from websockets.asyncio.server import ServerConnection

logger = logging.getLogger(__name__)


class RelayHub:
    """The set of open relay connections."""

    def __init__(self) -> None:
        self.connections: set[ServerConnection] = set()

    def register(self, connection: ServerConnection) -> None:
        self.connections.add(connection)
        logger.info("Client connected (%d open)", len(self.connections))

    def unregister(self, connection: ServerConnection) -> None:
        self.connections.discard(connection)
        logger.info("Client disconnected (%d open)", len(self.connections))

    def broadcast(self, sender: ServerConnection, message: str | bytes) -> int:
        """Forward message to every connection except sender.

        The message is written to each connection's buffer without waiting
        for it to drain, so a slow or stalled peer holds up nobody else.
        Writes happen in call order, which keeps messages from one sender
        in order. Connections that are closing or fail the write are
        skipped and logged by websockets.

        Args:
            sender: The connection the message came from.
            message: Raw payload, forwarded unchanged. Text stays text and
                bytes stay binary.

        Returns:
            Number of connections the message was offered to.
        """
        targets = self.connections - {sender}
        if not targets:
            return 0

        broadcast(targets, message)
        logger.debug("Forwarded message to %d peers", len(targets))
        return len(targets)
