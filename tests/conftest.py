#!/usr/bin/env python3
"""Pytest fixtures for lclipsync tests.

Provides an in-memory clipboard, an in-memory relay connection and a
fresh sync session.
"""

from __future__ import annotations

import asyncio

import pytest

from lclipsync.clipboard import ClipboardError
from lclipsync.sync_state import SyncSession


class FakeClipboard:
    """In-memory clipboard recording every write.

    Set ``read_error`` or ``write_error`` to make the next calls fail.
    """

    def __init__(self, content: str = "") -> None:
        self.content = content
        self.writes: list[str] = []
        self.read_error: ClipboardError | None = None
        self.write_error: ClipboardError | None = None

    async def read(self) -> str:
        if self.read_error is not None:
            raise self.read_error
        return self.content

    async def write(self, text: str) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.content = text
        self.writes.append(text)


class FakeConnection:
    """In-memory relay connection.

    Messages fed with ``feed()`` are yielded by async iteration; ``close()``
    ends the iteration cleanly and ``fail()`` ends it with an error.
    """

    def __init__(self) -> None:
        self.sent: list[str | bytes] = []
        self._incoming: asyncio.Queue = asyncio.Queue()

    async def send(self, message: str | bytes) -> None:
        self.sent.append(message)

    def feed(self, message: str | bytes) -> None:
        self._incoming.put_nowait(message)

    def close(self) -> None:
        self._incoming.put_nowait(None)

    def fail(self, error: BaseException) -> None:
        self._incoming.put_nowait(error)

    def __aiter__(self):
        return self

    async def __anext__(self) -> str | bytes:
        item = await self._incoming.get()
        if item is None:
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def clipboard() -> FakeClipboard:
    """Create an empty in-memory clipboard."""
    return FakeClipboard()


@pytest.fixture
def connection() -> FakeConnection:
    """Create an in-memory relay connection."""
    return FakeConnection()


@pytest.fixture
def session() -> SyncSession:
    """Create a fresh SyncSession."""
    return SyncSession()
