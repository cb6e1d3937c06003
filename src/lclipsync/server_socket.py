#!/usr/bin/env python3
"""Listening socket helpers for the relay.

This module provides utility functions around the relay's listening
address:
- Choosing the addresses to advertise for a bind host
- Printing startup messages
"""

from __future__ import annotations

import ipaddress
import sys

from lclipsync.address import format_endpoint
from lclipsync.subnet_scan import local_ipv4_interfaces

WILDCARD_HOSTS = ("", "0.0.0.0", "::")


def advertised_addresses(bind_host: str) -> list[str]:
    """Return the addresses clients can reach the relay on.

    A wildcard bind is reachable on every non-loopback IPv4 interface;
    a specific IP address is reachable only on itself.

    Args:
        bind_host: Host the relay listens on.

    Returns:
        Addresses in dotted or colon form, possibly empty for a hostname.
    """
    if bind_host in WILDCARD_HOSTS:
        return [address for address, _ in local_ipv4_interfaces()]
    try:
        return [str(ipaddress.ip_address(bind_host))]
    except ValueError:
        return []


def print_startup_message(bind_host: str, port: int, addresses: list[str]) -> None:
    """Print relay startup message to stderr.

    Shows the bind address and a connection URL per reachable address,
    for clients that cannot use discovery.

    Args:
        bind_host: Host the relay listens on.
        port: Port the relay listens on.
        addresses: Addresses clients can reach the relay on.
    """
    print(f"Clipboard relay listening on {bind_host or '*'}:{port}", file=sys.stderr)
    for address in addresses:
        print(f"  {format_endpoint(address, port)}", file=sys.stderr)
