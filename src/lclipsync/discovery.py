#!/usr/bin/env python3
"""Relay endpoint discovery.

resolve_endpoint() tries, in order, and stops at the first success:

1. the explicitly configured URL, used verbatim;
2. a DNS-SD browse for the relay's advertisement record;
3. a TCP scan of the attached IPv4 subnets (optional);
4. ws://localhost on the well-known port.

Lookup timeouts and transport errors only move the chain to the next
strategy; resolve_endpoint() itself never fails.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from zeroconf import Error as ZeroconfError
from zeroconf import ServiceStateChange
from zeroconf.asyncio import AsyncServiceBrowser, AsyncServiceInfo, AsyncZeroconf

from lclipsync.address import format_endpoint, pick_address
from lclipsync.constants import (
    DEFAULT_PORT,
    DISCOVERY_TIMEOUT,
    RECORD_RESOLVE_TIMEOUT_MS,
    REQUERY_INTERVAL,
    SERVICE_PROTOCOL,
    SERVICE_TYPE,
)
from lclipsync.subnet_scan import scan_for_relay

if TYPE_CHECKING:
    from zeroconf import Zeroconf

    from lclipsync.config import ClientConfig

logger = logging.getLogger(__name__)

FALLBACK_HOST = "localhost"


class DiscoveryError(Exception):
    """Advertisement lookup failed; the next strategy should be tried."""


class DiscoveryTimeout(DiscoveryError):
    """No usable advertisement record arrived before the deadline."""


@dataclass(frozen=True)
class CandidateEndpoint:
    """A relay address and port found by discovery."""

    address: str
    port: int

    @property
    def url(self) -> str:
        return format_endpoint(self.address, self.port)


def service_type_name(service_type: str, protocol: str = SERVICE_PROTOCOL) -> str:
    """Return the DNS-SD type name, e.g. ``_clip-sync._tcp.local.``."""
    return f"_{service_type}._{protocol}.local."


async def _resolve_record(
    aiozc: AsyncZeroconf,
    type_name: str,
    name: str,
    timeout_ms: int,
    default_port: int,
) -> CandidateEndpoint | None:
    """Resolve one advertised instance to an endpoint.

    Returns None when the record does not resolve in time or carries no
    address, so the caller keeps waiting for another record.
    """
    info = AsyncServiceInfo(type_name, name)
    if not await info.async_request(aiozc.zeroconf, timeout_ms):
        logger.debug("Record %s did not resolve", name)
        return None

    address = pick_address(info.parsed_addresses())
    if address is None:
        logger.debug("Record %s has no usable address, still waiting", name)
        return None

    return CandidateEndpoint(address=address, port=info.port or default_port)


async def browse_for_relay(
    service_type: str = SERVICE_TYPE,
    timeout: float = DISCOVERY_TIMEOUT,
    requery_interval: float = REQUERY_INTERVAL,
    default_port: int = DEFAULT_PORT,
) -> CandidateEndpoint:
    """Browse the local network for a relay advertisement.

    The browser is recreated every ``requery_interval`` seconds so the
    query is re-sent on networks that drop multicast packets. The browser
    and the zeroconf instance are released however the lookup ends.

    Args:
        service_type: Advertisement type without underscores or domain.
        timeout: Overall lookup deadline in seconds.
        requery_interval: Seconds between re-issued queries.
        default_port: Port to use when a record carries none.

    Returns:
        The first advertised relay with a usable address.

    Raises:
        DiscoveryTimeout: If nothing usable answered before the deadline.
        DiscoveryError: If the advertisement transport fails.
    """
    type_name = service_type_name(service_type)
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    names: asyncio.Queue[str] = asyncio.Queue()

    def on_service_state_change(
        zeroconf: Zeroconf,
        service_type: str,
        name: str,
        state_change: ServiceStateChange,
    ) -> None:
        if state_change in (ServiceStateChange.Added, ServiceStateChange.Updated):
            names.put_nowait(name)

    aiozc: AsyncZeroconf | None = None
    browser: AsyncServiceBrowser | None = None
    try:
        aiozc = AsyncZeroconf()
        browser = AsyncServiceBrowser(
            aiozc.zeroconf, type_name, handlers=[on_service_state_change]
        )
        next_query = loop.time() + requery_interval

        while True:
            now = loop.time()
            if now >= deadline:
                raise DiscoveryTimeout(
                    f"No {type_name} advertisement within {timeout:.1f}s"
                )
            if now >= next_query:
                logger.debug("Re-issuing browse query for %s", type_name)
                await browser.async_cancel()
                browser = AsyncServiceBrowser(
                    aiozc.zeroconf, type_name, handlers=[on_service_state_change]
                )
                next_query = now + requery_interval

            try:
                name = await asyncio.wait_for(
                    names.get(), timeout=min(deadline, next_query) - now
                )
            except asyncio.TimeoutError:
                continue

            remaining_ms = int((deadline - loop.time()) * 1000)
            endpoint = await _resolve_record(
                aiozc,
                type_name,
                name,
                max(min(RECORD_RESOLVE_TIMEOUT_MS, remaining_ms), 1),
                default_port,
            )
            if endpoint is not None:
                return endpoint
    except (OSError, ZeroconfError) as e:
        raise DiscoveryError(f"Advertisement lookup failed: {e}") from e
    finally:
        if browser is not None:
            await browser.async_cancel()
        if aiozc is not None:
            await aiozc.async_close()


async def resolve_endpoint(config: ClientConfig) -> str:
    """Find the relay URL to connect to.

    Args:
        config: Client configuration.

    Returns:
        A websocket URL. Falls back to localhost when every other
        strategy fails.
    """
    if config.server_url:
        logger.info("Using configured relay %s", config.server_url)
        return config.server_url

    try:
        endpoint = await browse_for_relay(
            config.service_type,
            config.discovery_timeout,
            config.requery_interval,
            config.port,
        )
    except DiscoveryError as e:
        logger.warning("Relay advertisement lookup failed: %s", e)
    else:
        logger.info("Discovered relay at %s", endpoint.url)
        return endpoint.url

    if config.scan_enabled:
        try:
            host = await scan_for_relay(
                config.port,
                config.scan_timeout,
                config.scan_max_hosts,
                config.scan_concurrency,
            )
        except OSError as e:
            logger.warning("Subnet scan failed: %s", e)
            host = None
        if host is not None:
            url = format_endpoint(host, config.port)
            logger.info("Found relay by subnet scan at %s", url)
            return url
    else:
        logger.debug("Subnet scan disabled")

    fallback = format_endpoint(FALLBACK_HOST, config.port)
    logger.warning("No relay found, falling back to %s", fallback)
    return fallback
