#!/usr/bin/env python3
"""Clipboard synchronization event handlers.

This module provides handlers for clipboard synchronization events:
- establish_baseline: record the clipboard on connect without sending it
- handle_poll_tick: process a local clipboard change and send to the relay
- handle_incoming_content: receive relay content and set local clipboard
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from lclipsync.clipboard import ClipboardError
from lclipsync.protocol import encode_message, validate_content_size
from lclipsync.sync_state import SyncPhase

if TYPE_CHECKING:
    from lclipsync.clipboard import Clipboard
    from lclipsync.sync_state import SyncSession

logger = logging.getLogger(__name__)


class MessageSender(Protocol):
    """The sending half of a relay connection."""

    async def send(self, message: str) -> None:
        ...


def _preview(content: str, limit: int = 40) -> str:
    """Shorten content for log output."""
    if len(content) <= limit:
        return repr(content)
    return repr(content[:limit]) + "..."


async def establish_baseline(session: SyncSession, clipboard: Clipboard) -> None:
    """Record the current clipboard as the local baseline and go CONNECTED.

    Pre-existing clipboard content of a newly joined device is not sent
    to the group. A failed read leaves the baseline empty.

    Args:
        session: The session of the new connection.
        clipboard: The local clipboard.
    """
    try:
        session.record_local(await clipboard.read())
    except ClipboardError as e:
        logger.info("Clipboard empty or unreadable at connect: %s", e)
    session.phase = SyncPhase.CONNECTED


async def handle_poll_tick(
    session: SyncSession,
    clipboard: Clipboard,
    connection: MessageSender,
) -> bool:
    """Poll the clipboard once and send new local content.

    Args:
        session: The sync session.
        clipboard: The local clipboard.
        connection: The relay connection to send on.

    Returns:
        True if content was sent.
    """
    try:
        content = await clipboard.read()
    except ClipboardError as e:
        logger.debug("Clipboard poll failed: %s", e)
        return False

    if not session.has_local_change(content):
        return False

    sent = False
    if session.should_send(content):
        if not validate_content_size(content):
            logger.warning("Clipboard content exceeds 10 MB limit, skipping")
        else:
            await connection.send(encode_message(content))
            session.record_sent(content)
            sent = True
            logger.info("Sent %s", _preview(content))
    else:
        logger.debug("Skipping echo of content already known to relay")

    session.record_local(content)
    return sent


async def handle_incoming_content(
    session: SyncSession, clipboard: Clipboard, content: str
) -> None:
    """Apply content received from the relay to the local clipboard.

    Records the content in the session BEFORE writing the clipboard so
    the following poll does not send it back. A write failure is logged
    and the session keeps the received value.

    Args:
        session: The sync session.
        clipboard: The local clipboard.
        content: Clipboard text received from the relay.
    """
    session.record_received(content)

    try:
        await clipboard.write(content)
    except ClipboardError as e:
        logger.error("Failed to write to clipboard: %s", e)
        return

    logger.info("Received and synced %s", _preview(content))
