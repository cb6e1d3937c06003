#!/usr/bin/env python3
"""
Unit tests for address ranking and endpoint formatting.
"""
from lclipsync.address import format_endpoint, is_link_local, pick_address


def test_pick_address_empty_returns_none() -> None:
    """Test an empty candidate list yields None."""
    assert pick_address([]) is None


def test_pick_address_prefers_dotted_over_colon() -> None:
    """Test IPv4 wins even when an IPv6 address comes first."""
    assert pick_address(["fd00::5", "192.168.1.5"]) == "192.168.1.5"
    assert pick_address(["192.168.1.5", "fd00::5"]) == "192.168.1.5"


def test_pick_address_first_dotted_wins() -> None:
    """Test the first of several IPv4 addresses is chosen."""
    assert pick_address(["fd00::1", "10.0.0.2", "10.0.0.3"]) == "10.0.0.2"


def test_pick_address_skips_link_local_ipv6() -> None:
    """Test a routable IPv6 address beats an earlier link-local one."""
    assert pick_address(["fe80::1", "2001:db8::7"]) == "2001:db8::7"


def test_pick_address_only_link_local_returns_first() -> None:
    """Test link-local candidates are a last resort, never None."""
    assert pick_address(["fe80::1", "FE80::2"]) == "fe80::1"


def test_pick_address_hostname_last_resort() -> None:
    """Test a candidate of no known form is returned when alone."""
    assert pick_address(["relayhost"]) == "relayhost"


def test_pick_address_is_deterministic() -> None:
    """Test the same input always gives the same answer."""
    candidates = ["fe80::1", "fd00::2", "172.16.0.9"]
    assert {pick_address(candidates) for _ in range(5)} == {"172.16.0.9"}


def test_is_link_local_case_insensitive() -> None:
    """Test link-local detection ignores case."""
    assert is_link_local("FE80::abcd")
    assert not is_link_local("fd00::1")


def test_format_endpoint_ipv4() -> None:
    """Test IPv4 addresses are not bracketed."""
    assert format_endpoint("192.168.1.5", 8080) == "ws://192.168.1.5:8080"


def test_format_endpoint_ipv6_bracketed() -> None:
    """Test IPv6 addresses are wrapped in brackets."""
    assert format_endpoint("fd00::5", 8080) == "ws://[fd00::5]:8080"


def test_format_endpoint_already_bracketed() -> None:
    """Test an already bracketed IPv6 literal is kept as-is."""
    assert format_endpoint("[fd00::5]", 9000) == "ws://[fd00::5]:9000"


def test_format_endpoint_hostname_and_scheme() -> None:
    """Test hostnames pass through and the scheme is configurable."""
    assert format_endpoint("localhost", 8080, scheme="wss") == "wss://localhost:8080"
