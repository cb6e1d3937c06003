#!/usr/bin/env python3
"""
Wire format for clipboard messages.

Each relay message is one websocket text frame whose payload is the
clipboard text itself. There is no envelope, type tag or length prefix;
the websocket framing already delimits messages.

Binary frames are tolerated on receipt as long as they decode as UTF-8.
Content is capped at 10 MB in both directions to prevent memory exhaustion.
"""
from __future__ import annotations

# Maximum size of clipboard content in bytes (10 MB).
# Also passed to websockets as max_size for incoming frames.
MAX_CONTENT_SIZE: int = 10485760


class ProtocolError(Exception):
    """
    Exception raised for protocol-level errors.

    Raised when an incoming frame cannot be turned into clipboard text.
    """

    pass


def encode_message(text: str) -> str:
    """
    Prepare clipboard text for sending.

    Text frames are sent as-is; websockets performs the UTF-8 encoding.

    Args:
        text: Clipboard content.

    Returns:
        The payload to pass to the connection's send().
    """
    return text


def decode_message(raw: str | bytes) -> str:
    """
    Turn a received frame payload into clipboard text.

    Args:
        raw: Payload of a text (str) or binary (bytes) frame.

    Returns:
        Clipboard text.

    Raises:
        ProtocolError: If a binary payload is not valid UTF-8.
    """
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ProtocolError(f"Binary frame is not valid UTF-8: {e}") from e


def validate_content_size(text: str) -> bool:
    """
    Check if content size is within the allowed limit.

    Args:
        text: Clipboard content to validate.

    Returns:
        True if the UTF-8 encoded size is at most MAX_CONTENT_SIZE.
    """
    return len(text.encode("utf-8")) <= MAX_CONTENT_SIZE
