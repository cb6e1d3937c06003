#!/usr/bin/env python3
"""End-to-end tests: two devices syncing through a relay on localhost.

Run with: pytest -m integration
Skip with: pytest -m "not integration"
"""

import asyncio
from contextlib import suppress
from functools import partial

import pytest
from conftest import FakeClipboard
from websockets.asyncio.server import serve

from lclipsync.client_retry import connect_to_relay
from lclipsync.relay import RelayHub
from lclipsync.server_handler import handle_client
from lclipsync.sync import SyncSession, run_sync_loop

pytestmark = pytest.mark.integration

POLL = 0.02


async def wait_until(predicate, timeout: float = 3.0) -> None:
    """Poll predicate until it holds or fail the test."""
    async def waiter():
        while not predicate():
            await asyncio.sleep(0.01)
    await asyncio.wait_for(waiter(), timeout)


@pytest.mark.asyncio
async def test_change_propagates_once_without_echo() -> None:
    """Test X's copy reaches Y only, and Y does not send it back."""
    hub = RelayHub()
    async with serve(partial(handle_client, hub), "127.0.0.1", 0) as server:
        port = server.sockets[0].getsockname()[1]
        url = f"ws://127.0.0.1:{port}"

        x_clip, y_clip = FakeClipboard(), FakeClipboard()
        x_session, y_session = SyncSession(), SyncSession()
        x_conn = await connect_to_relay(url)
        y_conn = await connect_to_relay(url)
        tasks = [
            asyncio.create_task(run_sync_loop(x_session, x_clip, x_conn, POLL)),
            asyncio.create_task(run_sync_loop(y_session, y_clip, y_conn, POLL)),
        ]
        try:
            await wait_until(lambda: len(hub.connections) == 2)
            await asyncio.sleep(POLL * 3)

            x_clip.content = "hello"
            await wait_until(lambda: y_clip.content == "hello")

            # Several poll ticks on both sides
            await asyncio.sleep(POLL * 10)

            assert y_clip.writes == ["hello"]
            assert x_clip.writes == []
            assert y_session.last_local_content == "hello"
            assert y_session.last_remote_content == "hello"
            assert x_session.last_remote_content == "hello"
        finally:
            for task in tasks:
                task.cancel()
                with suppress(asyncio.CancelledError, ConnectionError):
                    await task
            await x_conn.close()
            await y_conn.close()


@pytest.mark.asyncio
async def test_relay_shutdown_disconnects_clients() -> None:
    """Test devices leave the sync loop with ConnectionError when the relay stops."""
    hub = RelayHub()
    server = await serve(partial(handle_client, hub), "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]

    session = SyncSession()
    conn = await connect_to_relay(f"ws://127.0.0.1:{port}")
    task = asyncio.create_task(run_sync_loop(session, FakeClipboard(), conn, POLL))
    await wait_until(lambda: len(hub.connections) == 1)

    server.close()
    await server.wait_closed()

    with pytest.raises(ConnectionError):
        await asyncio.wait_for(task, 3.0)
