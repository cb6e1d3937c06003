#!/usr/bin/env python3
"""Default values for relay discovery, synchronization and reconnection.

Every value here can be overridden from the command line or environment,
see main.py.
"""

# Well-known relay port used for advertisement, scanning and fallback.
DEFAULT_PORT: int = 8080

# Service advertisement record published by the relay.
SERVICE_TYPE: str = "clip-sync"
SERVICE_NAME: str = "Clipboard Hub"
SERVICE_PROTOCOL: str = "tcp"
APP_TAG: str = "lclipsync"

# Address the relay binds to.
DEFAULT_BIND_HOST: str = "0.0.0.0"

# Advertisement lookup timeout and browse re-query period in seconds.
DISCOVERY_TIMEOUT: float = 7.0
REQUERY_INTERVAL: float = 1.0

# Time allowed for resolving a single advertised record in milliseconds.
RECORD_RESOLVE_TIMEOUT_MS: int = 1500

# Subnet scan limits.
SCAN_CONNECT_TIMEOUT: float = 0.35
SCAN_MAX_HOSTS: int = 512
SCAN_CONCURRENCY: int = 80

# Clipboard poll cadence in seconds.
POLL_INTERVAL: float = 1.0

# Retry parameters for exponential backoff reconnection.
# Initial delay between connection attempts in seconds.
INITIAL_WAIT: float = 1.0

# Maximum delay between connection attempts in seconds.
MAX_WAIT: float = 30.0

# Multiplier for exponential backoff (delay = initial * multiplier^attempt).
WAIT_MULTIPLIER: float = 2.0

# Websocket opening handshake timeout in seconds.
OPEN_TIMEOUT: float = 10.0
