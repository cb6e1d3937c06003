#!/usr/bin/env python3
"""Client mode implementation for lclipsync.

This module provides the main entry point for client mode which finds
the relay on the local network, polls the local clipboard and sends
changes to the relay, while also applying clipboard updates other
devices sent through the relay.

See client_retry.py for connection handling.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING

from lclipsync.client_retry import run_client_connection
from lclipsync.clipboard import PyperclipClipboard

if TYPE_CHECKING:
    from lclipsync.clipboard import Clipboard
    from lclipsync.config import ClientConfig


async def run_client(config: ClientConfig, clipboard: Clipboard | None = None) -> None:
    """Run client mode until interrupted.

    Args:
        config: Client configuration.
        clipboard: Clipboard backend; the system clipboard by default.
    """
    if clipboard is None:
        clipboard = PyperclipClipboard()

    # Register signal handlers for clean shutdown
    shutdown_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, shutdown_requested.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown_requested.set)

    await run_client_connection(config, clipboard, shutdown_requested)
