"""Access to the host clipboard.

The synchronization logic only needs two asynchronous operations, reading
and writing the current text value. They are described by the Clipboard
protocol so tests and alternative backends can stand in for the system
clipboard.

PyperclipClipboard is the default backend. pyperclip calls block on
helper processes (xclip, pbpaste, ...) so they run in a worker thread.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import pyperclip

# The xclip, xsel and pbpaste backends decode helper output as UTF-8
# without error handling.
_BACKEND_ERRORS = (pyperclip.PyperclipException, UnicodeError, OSError)

class ClipboardError(Exception):
    """Raised when the clipboard cannot be read or written.

    Typical causes are an empty clipboard, non-text content or a missing
    clipboard helper program.
    """


class Clipboard(Protocol):
    """Text clipboard capability."""

    async def read(self) -> str:
        """Return the current clipboard text."""
        ...

    async def write(self, text: str) -> None:
        """Replace the clipboard text."""
        ...


class PyperclipClipboard:
    """Clipboard backed by pyperclip."""

    async def read(self) -> str:
        """Read clipboard text.

        Returns:
            The current clipboard text.

        Raises:
            ClipboardError: If pyperclip or its helper program fails, or the
                clipboard does not hold UTF-8 text.
        """
        try:
            content = await asyncio.to_thread(pyperclip.paste)
        except _BACKEND_ERRORS as e:
            raise ClipboardError(f"Failed to read clipboard: {e}") from e
        if not isinstance(content, str):
            raise ClipboardError("Clipboard does not hold text")
        return content

    async def write(self, text: str) -> None:
        """Write clipboard text.

        Args:
            text: Content to place on the clipboard.

        Raises:
            ClipboardError: If pyperclip or its helper program fails.
        """
        try:
            await asyncio.to_thread(pyperclip.copy, text)
        except _BACKEND_ERRORS as e:
            raise ClipboardError(f"Failed to write clipboard: {e}") from e
