#!/usr/bin/env python3
"""
Tests for relay startup, advertisement lifecycle and shutdown.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from lclipsync.config import RelayConfig
from lclipsync.server import RelayBindError, run_server


@pytest.fixture
def mock_advertiser() -> MagicMock:
    """Create a mock ServiceAdvertiser instance."""
    advertiser = MagicMock()
    advertiser.publish = AsyncMock(return_value=True)
    advertiser.retract = AsyncMock()
    return advertiser


@pytest.mark.asyncio
async def test_run_server_publishes_and_retracts(mock_advertiser: MagicMock) -> None:
    """Test the advertisement is published on start and withdrawn on shutdown."""
    config = RelayConfig(host="127.0.0.1", port=0, service_name="Test Hub")
    shutdown = asyncio.Event()

    with patch("lclipsync.server.ServiceAdvertiser", return_value=mock_advertiser) as mock_cls:
        task = asyncio.create_task(run_server(config, shutdown))
        await asyncio.sleep(0.05)
        mock_advertiser.publish.assert_awaited_once()
        mock_advertiser.retract.assert_not_called()

        shutdown.set()
        await asyncio.wait_for(task, 2.0)

    mock_cls.assert_called_once_with("Test Hub", "clip-sync", 0, ["127.0.0.1"])
    mock_advertiser.retract.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_server_bind_failure_is_fatal(mock_advertiser: MagicMock) -> None:
    """Test a port already in use raises RelayBindError before advertising."""
    blocker = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
    port = blocker.sockets[0].getsockname()[1]

    try:
        with patch("lclipsync.server.ServiceAdvertiser", return_value=mock_advertiser):
            with pytest.raises(RelayBindError):
                await run_server(RelayConfig(host="127.0.0.1", port=port), asyncio.Event())
    finally:
        blocker.close()
        await blocker.wait_closed()

    mock_advertiser.publish.assert_not_called()
