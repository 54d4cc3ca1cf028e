"""Unit tests for configuration loading"""
import pytest

from rabbitmq_wiring import (
    RabbitMQClientConfig,
    TcpEndpoint,
    load_client_config,
    resolve_connection_plan,
)


class TestLoadClientConfig:
    """Test reading RABBITMQ_* environment variables"""

    def test_defaults(self, monkeypatch):
        for name in ["RABBITMQ_ENABLED", "RABBITMQ_HOSTS", "RABBITMQ_ENDPOINTS",
                     "RABBITMQ_HOST", "RABBITMQ_CONNECTION_NAME"]:
            monkeypatch.delenv(name, raising=False)

        config = load_client_config()

        assert config.host_name == "127.0.0.1"
        assert config.host_names is None
        assert config.tcp_endpoints is None
        assert config.client_provided_name is None

    def test_disabled_returns_none(self, monkeypatch):
        monkeypatch.setenv("RABBITMQ_ENABLED", "false")

        config = load_client_config()

        assert config is None
        assert resolve_connection_plan(config) is None

    def test_lists_are_parsed(self, monkeypatch):
        monkeypatch.setenv("RABBITMQ_ENABLED", "true")
        monkeypatch.setenv("RABBITMQ_HOSTS", "h1, h2")
        monkeypatch.setenv("RABBITMQ_ENDPOINTS", "h1:5672,h2:5673,h3")
        monkeypatch.setenv("RABBITMQ_CONNECTION_NAME", "svc-a")
        monkeypatch.setenv("RABBITMQ_HEARTBEAT", "30")
        monkeypatch.setenv("RABBITMQ_AUTOMATIC_RECOVERY", "no")

        config = load_client_config()

        assert config.host_names == ("h1", "h2")
        assert config.tcp_endpoints == (
            TcpEndpoint(host_name="h1", port=5672),
            TcpEndpoint(host_name="h2", port=5673),
            TcpEndpoint(host_name="h3", port=5672),
        )
        assert config.client_provided_name == "svc-a"
        assert config.requested_heartbeat == 30
        assert config.automatic_recovery_enabled is False


class TestClientConfigImmutability:
    """Test that host lists cannot change after the config is built"""

    def test_host_lists_are_tuples(self):
        config = RabbitMQClientConfig(
            host_names=["h1"], tcp_endpoints=[{"host_name": "h1"}]
        )

        assert config.host_names == ("h1",)
        with pytest.raises(AttributeError):
            config.host_names.append("h2")
        with pytest.raises(AttributeError):
            config.tcp_endpoints.append(TcpEndpoint(host_name="h2"))

    def test_resolution_is_stable(self):
        config = RabbitMQClientConfig(host_names=["h1"])

        first = resolve_connection_plan(config)
        second = resolve_connection_plan(config)

        assert first.hosts == second.hosts == [("h1", 5672)]
