#!/usr/bin/env python3
"""Bidirectional clipboard synchronization coordination.

This module re-exports synchronization components from submodules for
convenient imports. The actual implementations are in:
- sync_state: SyncSession, SyncPhase and SyncEvent
- sync_handlers: establish_baseline, handle_poll_tick, handle_incoming_content
- sync_loop: run_sync_loop
"""

from lclipsync.sync_handlers import (
    establish_baseline,
    handle_incoming_content,
    handle_poll_tick,
)
from lclipsync.sync_loop import run_sync_loop
from lclipsync.sync_state import SyncPhase, SyncSession

__all__ = [
    "SyncPhase",
    "SyncSession",
    "establish_baseline",
    "handle_incoming_content",
    "handle_poll_tick",
    "run_sync_loop",
]
