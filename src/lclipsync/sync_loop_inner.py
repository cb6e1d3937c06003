#!/usr/bin/env python3
"""Inner synchronization loop implementation.

This module contains the event dispatch loop that applies poll, message
and close events to a sync session, one event at a time.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from lclipsync.sync_handlers import handle_incoming_content, handle_poll_tick
from lclipsync.sync_state import EventKind, SyncPhase

if TYPE_CHECKING:
    from lclipsync.clipboard import Clipboard
    from lclipsync.sync_handlers import MessageSender
    from lclipsync.sync_state import SyncEvent, SyncSession

logger = logging.getLogger(__name__)


async def sync_loop_inner(
    session: SyncSession,
    clipboard: Clipboard,
    connection: MessageSender,
    events: asyncio.Queue[SyncEvent],
) -> None:
    """Dispatch queued events until a CLOSED event arrives.

    Args:
        session: The sync session.
        clipboard: The local clipboard.
        connection: The relay connection to send on.
        events: Queue fed by the ticker and receiver tasks.

    Raises:
        ConnectionError: On the CLOSED event, chained to the transport
            error if there was one.
    """
    while True:
        event = await events.get()

        if event.kind is EventKind.POLL:
            try:
                await handle_poll_tick(session, clipboard, connection)
            finally:
                if event.handled is not None:
                    event.handled.set()
        elif event.kind is EventKind.MESSAGE:
            await handle_incoming_content(session, clipboard, event.content)
        else:
            session.phase = SyncPhase.DISCONNECTED
            if event.error is not None:
                logger.warning("Connection to relay lost: %s", event.error)
                raise ConnectionError(
                    f"Connection to relay lost: {event.error}"
                ) from event.error
            logger.warning("Disconnected from relay")
            raise ConnectionError("Relay closed the connection")
