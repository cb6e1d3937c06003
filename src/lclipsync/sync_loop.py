#!/usr/bin/env python3
"""Main synchronization event loop.

This module provides run_sync_loop, which turns clipboard polling and
relay messages into a single stream of events. A ticker task queues a
POLL event every poll interval and a receiver task queues a MESSAGE event
per relay message and a CLOSED event when the connection ends. The inner
loop handles one event at a time, so a poll and a receipt never update
the session markers concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import suppress
from typing import TYPE_CHECKING, Protocol

from websockets.exceptions import ConnectionClosed

from lclipsync.constants import POLL_INTERVAL
from lclipsync.protocol import ProtocolError, decode_message
from lclipsync.sync_handlers import MessageSender, establish_baseline
from lclipsync.sync_loop_inner import sync_loop_inner
from lclipsync.sync_state import EventKind, SyncEvent, SyncPhase

if TYPE_CHECKING:
    from collections.abc import AsyncIterable

    from lclipsync.clipboard import Clipboard
    from lclipsync.sync_state import SyncSession

logger = logging.getLogger(__name__)


async def tick(events: asyncio.Queue[SyncEvent], interval: float) -> None:
    """Queue a POLL event every interval seconds until cancelled.

    The next interval starts only after the loop handled the previous
    POLL, so a stalled read or send never lets polls pile up.
    """
    while True:
        await asyncio.sleep(interval)
        handled = asyncio.Event()
        await events.put(SyncEvent(EventKind.POLL, handled=handled))
        await handled.wait()


async def receive_messages(
    connection: AsyncIterable[str | bytes],
    events: asyncio.Queue[SyncEvent],
) -> None:
    """Queue a MESSAGE event per relay message, then a CLOSED event.

    Frames that are not valid text are logged and skipped.
    """
    error: BaseException | None = None
    try:
        async for raw in connection:
            try:
                content = decode_message(raw)
            except ProtocolError as e:
                logger.warning("Ignoring malformed message: %s", e)
                continue
            await events.put(SyncEvent(EventKind.MESSAGE, content=content))
    except (ConnectionClosed, OSError) as e:
        error = e
    await events.put(SyncEvent(EventKind.CLOSED, error=error))


class RelayConnection(MessageSender, Protocol):
    """A relay connection: send() plus async iteration over messages."""

    def __aiter__(self) -> AsyncIterator[str | bytes]:
        ...


async def run_sync_loop(
    session: SyncSession,
    clipboard: Clipboard,
    connection: RelayConnection,
    poll_interval: float = POLL_INTERVAL,
) -> None:
    """Run clipboard synchronization over an open relay connection.

    Records the clipboard baseline, then processes poll and message
    events until the connection ends.

    Args:
        session: Fresh session for this connection.
        clipboard: The local clipboard.
        connection: Open relay connection.
        poll_interval: Seconds between clipboard polls.

    Raises:
        ConnectionError: When the connection closes or fails. The session
            is DISCONNECTED afterwards.
    """
    await establish_baseline(session, clipboard)
    logger.debug("Session connected, polling every %.2fs", poll_interval)

    events: asyncio.Queue[SyncEvent] = asyncio.Queue()
    ticker = asyncio.create_task(tick(events, poll_interval))
    receiver = asyncio.create_task(receive_messages(connection, events))
    try:
        await sync_loop_inner(session, clipboard, connection, events)
    except ConnectionClosed as e:
        session.phase = SyncPhase.DISCONNECTED
        raise ConnectionError(f"Connection to relay lost: {e}") from e
    finally:
        for task in (ticker, receiver):
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
