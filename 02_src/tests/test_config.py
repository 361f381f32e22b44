"""Tests for configuration helpers."""

import pytest

from cluster_tail.config import TailConfig, env_flag, parse_nodes
from cluster_tail.models import NodeDescriptor

ENV_VARS = [
    "VERBOSE",
    "TAIL_REQUEST_TIMEOUT",
    "TAIL_FAILURE_BACKOFF",
    "TAIL_POLL_INTERVAL",
    "TAIL_DEBUG_PORT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestTailConfig:
    """Tests for TailConfig."""

    def test_defaults(self):
        """Test the documented default timings."""
        config = TailConfig()
        assert config.verbose_failures is False
        assert config.request_timeout == 5.0
        assert config.failure_backoff == 1.0
        assert config.poll_interval == 0.2
        assert config.debug_port == 6191

    def test_from_env_defaults(self, clean_env):
        """Test that an empty environment gives the defaults."""
        assert TailConfig.from_env() == TailConfig()

    def test_from_env_overrides(self, clean_env):
        """Test reading every variable."""
        clean_env.setenv("VERBOSE", "1")
        clean_env.setenv("TAIL_REQUEST_TIMEOUT", "2.5")
        clean_env.setenv("TAIL_FAILURE_BACKOFF", "3")
        clean_env.setenv("TAIL_POLL_INTERVAL", "0.05")
        clean_env.setenv("TAIL_DEBUG_PORT", "7000")

        config = TailConfig.from_env()
        assert config == TailConfig(
            verbose_failures=True,
            request_timeout=2.5,
            failure_backoff=3.0,
            poll_interval=0.05,
            debug_port=7000,
        )

    def test_negative_duration(self, clean_env):
        """Test that negative sleeps are rejected."""
        clean_env.setenv("TAIL_POLL_INTERVAL", "-1")
        with pytest.raises(ValueError):
            TailConfig.from_env()

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
    def test_non_finite_duration(self, clean_env, value):
        """Test that NaN and infinity never reach asyncio.sleep."""
        clean_env.setenv("TAIL_POLL_INTERVAL", value)
        with pytest.raises(ValueError):
            TailConfig.from_env()

    @pytest.mark.parametrize("value", ["-5", "0", "65536", "port"])
    def test_invalid_port(self, clean_env, value):
        """Test that the debug port must be in 1..65535."""
        clean_env.setenv("TAIL_DEBUG_PORT", value)
        with pytest.raises(ValueError):
            TailConfig.from_env()

    def test_non_numeric_duration(self, clean_env):
        """Test that garbage is rejected."""
        clean_env.setenv("TAIL_FAILURE_BACKOFF", "soon")
        with pytest.raises(ValueError):
            TailConfig.from_env()


class TestEnvFlag:
    """Tests for env_flag()."""

    def test_unset(self, clean_env):
        assert env_flag("VERBOSE") is False

    @pytest.mark.parametrize("value", ["1", "true", "yes", "on", "TRUE", "anything"])
    def test_truthy(self, clean_env, value):
        clean_env.setenv("VERBOSE", value)
        assert env_flag("VERBOSE") is True

    @pytest.mark.parametrize("value", ["", "0", "false", "No", "OFF"])
    def test_falsy(self, clean_env, value):
        clean_env.setenv("VERBOSE", value)
        assert env_flag("VERBOSE") is False


class TestParseNodes:
    """Tests for parse_nodes()."""

    def test_empty(self):
        """Test unset and empty values."""
        assert parse_nodes(None) == []
        assert parse_nodes("") == []

    def test_default_port(self):
        """Test entries without a port."""
        assert parse_nodes("node-1=10.0.0.1") == [
            NodeDescriptor(identity="node-1", address="10.0.0.1", port=6191)
        ]

    def test_explicit_port_and_whitespace(self):
        """Test mixed entries keep their order."""
        nodes = parse_nodes(" a=10.0.0.1:7000 , b=node-b.local ,", default_port=9000)
        assert nodes == [
            NodeDescriptor(identity="a", address="10.0.0.1", port=7000),
            NodeDescriptor(identity="b", address="node-b.local", port=9000),
        ]

    @pytest.mark.parametrize("value", ["10.0.0.1", "=10.0.0.1", "a=", "a=host:port"])
    def test_invalid_entries(self, value):
        """Test that malformed entries raise."""
        with pytest.raises(ValueError):
            parse_nodes(value)
