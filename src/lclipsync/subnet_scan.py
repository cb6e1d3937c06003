#!/usr/bin/env python3
"""Active probing of attached IPv4 subnets for a listening relay.

Used when no advertisement record answers. Every host address of each
locally attached IPv4 network is tried with a short TCP connect on the
relay port. A fixed pool of workers drains a shared queue of candidates
and the scan stops as soon as one connect completes.

This only shows that something listens on the port; it does not verify
the service behind it.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
from collections.abc import Iterable

import ifaddr

from lclipsync.constants import SCAN_CONCURRENCY, SCAN_CONNECT_TIMEOUT, SCAN_MAX_HOSTS

logger = logging.getLogger(__name__)

_ALL_ONES = 0xFFFFFFFF


def prefix_to_netmask(prefix: int) -> str:
    """Convert a prefix length such as 24 to dotted netmask form."""
    mask = (_ALL_ONES << (32 - prefix)) & _ALL_ONES
    return str(ipaddress.IPv4Address(mask))


def local_ipv4_interfaces() -> list[tuple[str, str]]:
    """List non-loopback IPv4 interface addresses of this host.

    Returns:
        (address, netmask) pairs in dotted form, in adapter order.
    """
    interfaces: list[tuple[str, str]] = []
    for adapter in ifaddr.get_adapters():
        for ip in adapter.ips:
            if not ip.is_IPv4:
                continue
            if ipaddress.IPv4Address(ip.ip).is_loopback:
                continue
            interfaces.append((ip.ip, prefix_to_netmask(ip.network_prefix)))
    return interfaces


def hosts_for_interface(
    address: str, netmask: str, max_hosts: int = SCAN_MAX_HOSTS
) -> list[str]:
    """Compute the candidate host addresses of one interface's subnet.

    Args:
        address: The interface's own IPv4 address.
        netmask: The interface's netmask in dotted form.
        max_hosts: Subnets with more hosts than this are skipped.

    Returns:
        Every address strictly between the network and broadcast
        addresses except ``address`` itself, or an empty list when the
        subnet exceeds ``max_hosts``.
    """
    addr_int = int(ipaddress.IPv4Address(address))
    mask_int = int(ipaddress.IPv4Address(netmask))
    network = addr_int & mask_int
    broadcast = network | (~mask_int & _ALL_ONES)

    host_count = max(broadcast - network - 1, 0)
    if host_count > max_hosts:
        logger.debug(
            "Skipping %s/%s: %d hosts exceeds limit of %d",
            address, netmask, host_count, max_hosts,
        )
        return []

    return [
        str(ipaddress.IPv4Address(value))
        for value in range(network + 1, broadcast)
        if value != addr_int
    ]


async def probe_host(host: str, port: int, timeout: float = SCAN_CONNECT_TIMEOUT) -> bool:
    """Try a TCP connect to host:port.

    Args:
        host: IPv4 address to probe.
        port: TCP port to connect to.
        timeout: Seconds to wait for the connect to complete.

    Returns:
        True only if the connect completed within the timeout.
    """
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port), timeout=timeout
        )
    except asyncio.TimeoutError:
        logger.debug("Probe %s:%d timed out", host, port)
        return False
    except OSError as e:
        logger.debug("Probe %s:%d failed: %s", host, port, e)
        return False

    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass
    return True


async def probe_hosts(
    hosts: Iterable[str],
    port: int,
    timeout: float = SCAN_CONNECT_TIMEOUT,
    concurrency: int = SCAN_CONCURRENCY,
) -> str | None:
    """Probe hosts with bounded concurrency and return the first open one.

    Args:
        hosts: Candidate addresses.
        port: TCP port to probe.
        timeout: Per-probe connect timeout in seconds.
        concurrency: Maximum number of probes in flight.

    Returns:
        The first address whose connect completed, or None.
    """
    queue: asyncio.Queue[str] = asyncio.Queue()
    for host in hosts:
        queue.put_nowait(host)
    if queue.empty():
        return None

    found = asyncio.Event()
    result: list[str] = []

    async def worker() -> None:
        while not found.is_set():
            try:
                host = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            if await probe_host(host, port, timeout) and not found.is_set():
                result.append(host)
                found.set()

    workers = [
        asyncio.create_task(worker())
        for _ in range(min(concurrency, queue.qsize()))
    ]
    found_waiter = asyncio.create_task(found.wait())
    exhausted = asyncio.gather(*workers)
    try:
        await asyncio.wait(
            {found_waiter, exhausted}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        # Abandon probes still in flight once a host answered.
        found_waiter.cancel()
        exhausted.cancel()
        await asyncio.gather(found_waiter, exhausted, return_exceptions=True)

    return result[0] if result else None


async def scan_for_relay(
    port: int,
    timeout: float = SCAN_CONNECT_TIMEOUT,
    max_hosts: int = SCAN_MAX_HOSTS,
    concurrency: int = SCAN_CONCURRENCY,
) -> str | None:
    """Scan every attached IPv4 subnet for a host listening on port.

    Args:
        port: Relay port to look for.
        timeout: Per-probe connect timeout in seconds.
        max_hosts: Per-interface host ceiling; larger subnets are skipped.
        concurrency: Maximum number of probes in flight.

    Returns:
        Address of the first host that accepted a connection, or None.
    """
    candidates: dict[str, None] = {}
    for address, netmask in local_ipv4_interfaces():
        hosts = hosts_for_interface(address, netmask, max_hosts)
        logger.debug("Interface %s/%s contributes %d hosts", address, netmask, len(hosts))
        candidates.update(dict.fromkeys(hosts))

    if not candidates:
        logger.info("No IPv4 subnet suitable for scanning")
        return None

    logger.info("Scanning %d hosts for a relay on port %d", len(candidates), port)
    host = await probe_hosts(list(candidates), port, timeout, concurrency)
    if host is None:
        logger.info("Subnet scan found no relay")
    return host
