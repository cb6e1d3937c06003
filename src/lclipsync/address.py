#!/usr/bin/env python3
"""Ranking of candidate relay addresses and endpoint URL formatting.

Advertisement records can carry several addresses for the same relay.
A routable IPv4 address is preferred, then any IPv6 address that is not
link-local, then whatever came first.
"""

from __future__ import annotations

from collections.abc import Sequence

LINK_LOCAL_PREFIX = "fe80:"


def is_link_local(address: str) -> bool:
    """Return True for IPv6 link-local addresses (fe80::/10 written as fe80:)."""
    return address.lower().startswith(LINK_LOCAL_PREFIX)


def pick_address(addresses: Sequence[str]) -> str | None:
    """Pick the best address to connect to.

    Args:
        addresses: Candidate address strings in the order they were observed.

    Returns:
        The first dotted-form address, else the first non-link-local
        colon-form address, else the first candidate. None if the list
        is empty.
    """
    if not addresses:
        return None

    for address in addresses:
        if "." in address:
            return address

    for address in addresses:
        if ":" in address and not is_link_local(address):
            return address

    return addresses[0]


def format_endpoint(address: str, port: int, scheme: str = "ws") -> str:
    """Build a connection URL, bracketing IPv6 literals.

    Args:
        address: Host address (IPv4, IPv6 or hostname).
        port: TCP port of the relay.
        scheme: URL scheme.

    Returns:
        URL such as ``ws://192.168.1.5:8080`` or ``ws://[fd00::5]:8080``.
    """
    host = address
    if ":" in address and not address.startswith("["):
        host = f"[{address}]"
    return f"{scheme}://{host}:{port}"
