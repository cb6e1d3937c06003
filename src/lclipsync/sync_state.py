#!/usr/bin/env python3
"""Clipboard synchronization state.

This module provides the SyncSession dataclass holding the echo
suppression markers for one relay connection, the SyncPhase states a
session moves through, and the SyncEvent items the sync loop consumes.

The two markers:
- last_local_content: last value observed on (or written to) the local
  clipboard; a poll only acts when the clipboard differs from it
- last_remote_content: last value received from or sent to the relay;
  content equal to it is never transmitted

Received content sets both markers, sent content sets only
last_remote_content. A single marker could not tell "just sent" from
"just applied", and the next poll would send received content back.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import asyncio


class SyncPhase(enum.Enum):
    """Lifecycle of a sync session."""

    IDLE = "idle"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class EventKind(enum.Enum):
    """Kinds of events driving the sync loop."""

    POLL = "poll"
    MESSAGE = "message"
    CLOSED = "closed"


@dataclass(frozen=True)
class SyncEvent:
    """One unit of work for the sync loop.

    Attributes:
        kind: What happened.
        content: Received clipboard text for MESSAGE events.
        error: Transport error for CLOSED events, None on a clean close.
        handled: Set by the loop once a POLL event has been processed.
    """

    kind: EventKind
    content: str = ""
    error: BaseException | None = None
    handled: asyncio.Event | None = None


@dataclass
class SyncSession:
    """Echo suppression state for one relay connection.

    Attributes:
        last_local_content: Last value seen on the local clipboard.
        last_remote_content: Last value known to the relay group.
        phase: Current lifecycle phase.
    """

    last_local_content: str = ""
    last_remote_content: str = ""
    phase: SyncPhase = SyncPhase.IDLE

    def has_local_change(self, content: str) -> bool:
        """Return True if content differs from the last local value."""
        return content != self.last_local_content

    def should_send(self, content: str) -> bool:
        """Return True if content is not already known to the group."""
        return content != self.last_remote_content

    def record_local(self, content: str) -> None:
        """Remember content as the current local clipboard value."""
        self.last_local_content = content

    def record_sent(self, content: str) -> None:
        """Mark content as known to the group after sending it."""
        self.last_remote_content = content

    def record_received(self, content: str) -> None:
        """Adopt content from the relay as both local and group value.

        Must be called BEFORE writing the clipboard so the next poll sees
        the written value as unchanged.
        """
        self.last_remote_content = content
        self.last_local_content = content
