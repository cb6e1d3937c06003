#!/usr/bin/env python3
"""Runtime configuration for client and relay modes.

The dataclasses are built by main.py from command-line options, each of
which can also come from an environment variable. Durations are stored
in seconds.
"""

from __future__ import annotations

from dataclasses import dataclass

from lclipsync.constants import (
    DEFAULT_BIND_HOST,
    DEFAULT_PORT,
    DISCOVERY_TIMEOUT,
    POLL_INTERVAL,
    REQUERY_INTERVAL,
    SCAN_CONCURRENCY,
    SCAN_CONNECT_TIMEOUT,
    SCAN_MAX_HOSTS,
    SERVICE_NAME,
    SERVICE_TYPE,
)


@dataclass(frozen=True)
class ClientConfig:
    """Settings for a syncing device.

    Attributes:
        server_url: Explicit relay URL; disables all discovery when set.
        port: Well-known relay port used by scanning and the fallback.
        service_type: Advertisement type to browse for.
        discovery_timeout: Seconds to wait for an advertisement.
        requery_interval: Seconds between re-issued browse queries.
        scan_enabled: Whether the subnet scan strategy runs.
        scan_timeout: Per-probe connect timeout in seconds.
        scan_max_hosts: Per-interface host ceiling for the scan.
        scan_concurrency: Maximum probes in flight.
        poll_interval: Seconds between clipboard polls.
    """

    server_url: str | None = None
    port: int = DEFAULT_PORT
    service_type: str = SERVICE_TYPE
    discovery_timeout: float = DISCOVERY_TIMEOUT
    requery_interval: float = REQUERY_INTERVAL
    scan_enabled: bool = True
    scan_timeout: float = SCAN_CONNECT_TIMEOUT
    scan_max_hosts: int = SCAN_MAX_HOSTS
    scan_concurrency: int = SCAN_CONCURRENCY
    poll_interval: float = POLL_INTERVAL


@dataclass(frozen=True)
class RelayConfig:
    """Settings for the broadcast relay.

    Attributes:
        host: Address to bind the listening socket to.
        port: Port to listen on and advertise.
        service_name: Instance name of the advertisement record.
        service_type: Advertisement type to publish.
    """

    host: str = DEFAULT_BIND_HOST
    port: int = DEFAULT_PORT
    service_name: str = SERVICE_NAME
    service_type: str = SERVICE_TYPE
