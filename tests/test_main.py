"""Tests for CLI argument handling in main.py."""
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from lclipsync.config import ClientConfig, RelayConfig
from lclipsync.main import main


class TestCLIArguments:
    """Tests for command-line argument validation."""

    def test_no_mode_specified_exits_with_code_2(self):
        """Test that missing --server or --client gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, [])
        assert result.exit_code == 2
        assert "must be specified" in result.output

    def test_both_modes_specified_exits_with_code_2(self):
        """Test that both --server and --client gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--server", "--client"])
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_invalid_port_exits_with_code_2(self):
        """Test that an out-of-range port gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--client", "--port", "70000"])
        assert result.exit_code == 2

    def test_help_exits_with_code_0(self):
        """Test that --help exits cleanly with code 0 and shows env vars."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "server" in result.output.lower()
        assert "client" in result.output.lower()
        assert "LCLIPSYNC_SERVER_URL" in result.output


class TestConfigBuilding:
    """Tests for configuration passed to the selected mode."""

    def test_client_defaults(self):
        """Test client mode defaults match the documented values."""
        runner = CliRunner()
        with patch("lclipsync.main._run_mode") as mock_run:
            result = runner.invoke(main, ["--client"])

        assert result.exit_code == 0
        server, config = mock_run.call_args.args
        assert server is False
        assert config == ClientConfig()

    def test_client_options_convert_milliseconds(self):
        """Test millisecond options are stored in seconds."""
        runner = CliRunner()
        with patch("lclipsync.main._run_mode") as mock_run:
            result = runner.invoke(main, [
                "--client", "--discovery-timeout", "2500", "--scan-timeout", "100",
                "--poll-interval", "250", "--no-scan",
            ])

        assert result.exit_code == 0
        config = mock_run.call_args.args[1]
        assert config.discovery_timeout == 2.5
        assert config.scan_timeout == 0.1
        assert config.poll_interval == 0.25
        assert config.scan_enabled is False

    def test_client_reads_environment(self):
        """Test options can come from LCLIPSYNC_* environment variables."""
        runner = CliRunner()
        env = {
            "LCLIPSYNC_SERVER_URL": "ws://10.0.0.5:9000",
            "LCLIPSYNC_SCAN_MAX_HOSTS": "64",
            "LCLIPSYNC_SCAN": "false",
        }
        with patch("lclipsync.main._run_mode") as mock_run:
            result = runner.invoke(main, ["--client"], env=env)

        assert result.exit_code == 0
        config = mock_run.call_args.args[1]
        assert config.server_url == "ws://10.0.0.5:9000"
        assert config.scan_max_hosts == 64
        assert config.scan_enabled is False

    def test_server_config(self):
        """Test relay mode builds a RelayConfig."""
        runner = CliRunner()
        with patch("lclipsync.main._run_mode") as mock_run:
            result = runner.invoke(main, [
                "--server", "--host", "127.0.0.1", "--port", "9000",
                "--service-name", "Office Hub",
            ])

        assert result.exit_code == 0
        server, config = mock_run.call_args.args
        assert server is True
        assert config == RelayConfig(
            host="127.0.0.1", port=9000, service_name="Office Hub", service_type="clip-sync"
        )


def test_bind_failure_exits_with_code_1():
    """Test a relay bind failure prints an error and exits 1."""
    from lclipsync.server import RelayBindError

    runner = CliRunner()
    with patch("lclipsync.server.run_server", new=MagicMock()), \
        patch("asyncio.run", side_effect=RelayBindError("port in use")):
        result = runner.invoke(main, ["--server"])

    assert result.exit_code == 1
    assert "Error: port in use" in result.output


def test_client_connection_error_exits_with_code_1():
    """Test a client ConnectionError prints an error and exits 1."""
    runner = CliRunner()
    with patch("lclipsync.client.run_client", new=MagicMock()), \
        patch("asyncio.run", side_effect=ConnectionError("relay unreachable")):
        result = runner.invoke(main, ["--client", "--url", "ws://hub:8080"])

    assert result.exit_code == 1
    assert "Error: relay unreachable" in result.output


def test_unexpected_error_is_not_reported_as_usage_error():
    """Test errors other than bind and connection failures propagate."""
    runner = CliRunner()
    with patch("lclipsync.client.run_client", new=MagicMock()), \
        patch("asyncio.run", side_effect=ValueError("boom")):
        result = runner.invoke(main, ["--client", "--url", "ws://hub:8080"])

    assert isinstance(result.exception, ValueError)
    assert "Error: boom" not in result.output
