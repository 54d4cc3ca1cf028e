"""Shared configuration models for the RabbitMQ client wiring."""

import os
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, field_validator


def _read_only(value: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(value))


class TcpEndpoint(BaseModel, frozen=True):
    """A single broker endpoint used for ordered failover."""

    host_name: str
    port: int = 5672


class RabbitMQClientConfig(BaseModel, frozen=True):
    """RabbitMQ connection configuration.

    Only one host-addressing field is used per connection. Precedence is
    ``tcp_endpoints``, then ``host_names``, then ``host_name``; see
    :func:`rabbitmq_wiring.connection.resolve_connection_plan`.
    """

    port: int = 5672
    user_name: str = "guest"
    password: str = "guest"
    virtual_host: str = "/"
    automatic_recovery_enabled: bool = True
    topology_recovery_enabled: bool = True
    requested_connection_timeout: float = 30.0  # seconds
    requested_heartbeat: int = 60  # seconds
    client_provided_name: str | None = None
    host_name: str = "127.0.0.1"
    host_names: tuple[str, ...] | None = None
    tcp_endpoints: tuple[TcpEndpoint, ...] | None = None


class QueueOptions(BaseModel, frozen=True):
    """Queue declared and bound alongside an exchange."""

    name: str
    durable: bool = True
    exclusive: bool = False
    auto_delete: bool = False
    routing_keys: tuple[str, ...] = ()
    arguments: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("arguments")
    @classmethod
    def freeze_arguments(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _read_only(value)


class ExchangeOptions(BaseModel, frozen=True):
    """Broker-level exchange options, copied verbatim to the declaration."""

    type: str = "direct"
    durable: bool = True
    auto_delete: bool = False
    arguments: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    dead_letter_exchange: str | None = "default.dlx.exchange"
    dead_letter_exchange_type: str = "direct"
    requeue_failed_messages: bool = True
    queues: tuple[QueueOptions, ...] = ()

    @field_validator("arguments")
    @classmethod
    def freeze_arguments(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _read_only(value)


def _split(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_endpoint(value: str) -> TcpEndpoint:
    host, _, port = value.rpartition(":")
    if not host:
        return TcpEndpoint(host_name=value)
    return TcpEndpoint(host_name=host, port=int(port))


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_client_config() -> RabbitMQClientConfig | None:
    """
    Loads RabbitMQ connection configuration from environment variables.

    Returns:
        The parsed configuration, or None when ``RABBITMQ_ENABLED`` is false.
    """
    if not _flag("RABBITMQ_ENABLED", "true"):
        return None

    endpoints = [
        _parse_endpoint(item) for item in _split(os.getenv("RABBITMQ_ENDPOINTS"))
    ]
    host_names = _split(os.getenv("RABBITMQ_HOSTS"))

    return RabbitMQClientConfig(
        port=int(os.getenv("RABBITMQ_PORT", "5672")),
        user_name=os.getenv("RABBITMQ_USER", "guest"),
        password=os.getenv("RABBITMQ_PASSWORD", "guest"),
        virtual_host=os.getenv("RABBITMQ_VHOST", "/"),
        automatic_recovery_enabled=_flag("RABBITMQ_AUTOMATIC_RECOVERY", "true"),
        topology_recovery_enabled=_flag("RABBITMQ_TOPOLOGY_RECOVERY", "true"),
        requested_connection_timeout=float(
            os.getenv("RABBITMQ_CONNECTION_TIMEOUT", "30")
        ),
        requested_heartbeat=int(os.getenv("RABBITMQ_HEARTBEAT", "60")),
        client_provided_name=os.getenv("RABBITMQ_CONNECTION_NAME") or None,
        host_name=os.getenv("RABBITMQ_HOST", "127.0.0.1"),
        host_names=host_names or None,
        tcp_endpoints=endpoints or None,
    )
