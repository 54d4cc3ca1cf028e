"""Selection of a RabbitMQ connection strategy from client configuration."""

import logging
from collections.abc import Callable, Sequence
from typing import Literal

import pika
from pika.adapters.blocking_connection import BlockingConnection
from pydantic import BaseModel, ConfigDict

from rabbitmq_wiring.config import RabbitMQClientConfig

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[Sequence[pika.ConnectionParameters]], BlockingConnection]

ConnectionStrategy = Literal[
    "endpoints",
    "named_host_list",
    "named_host",
    "host_list",
    "host",
]


class ConnectionPlan(BaseModel):
    """A resolved, not yet opened, connection.

    ``parameters`` is ordered; the client tries each entry in turn until one
    connects. Recovery flags are carried for the client layer that owns
    reconnection.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    strategy: ConnectionStrategy
    parameters: tuple[pika.ConnectionParameters, ...]
    client_provided_name: str | None = None
    automatic_recovery_enabled: bool = True
    topology_recovery_enabled: bool = True

    @property
    def hosts(self) -> list[tuple[str, int]]:
        return [(p.host, p.port) for p in self.parameters]


def _parameters(
    config: RabbitMQClientConfig,
    host: str,
    port: int,
    client_provided_name: str | None = None,
) -> pika.ConnectionParameters:
    client_properties = None
    if client_provided_name:
        client_properties = {"connection_name": client_provided_name}

    return pika.ConnectionParameters(
        host=host,
        port=port,
        virtual_host=config.virtual_host,
        credentials=pika.PlainCredentials(config.user_name, config.password),
        heartbeat=config.requested_heartbeat,
        socket_timeout=config.requested_connection_timeout,
        client_properties=client_properties,
    )


def _plan(
    config: RabbitMQClientConfig,
    strategy: ConnectionStrategy,
    parameters: list[pika.ConnectionParameters],
    client_provided_name: str | None = None,
) -> ConnectionPlan:
    return ConnectionPlan(
        strategy=strategy,
        parameters=tuple(parameters),
        client_provided_name=client_provided_name,
        automatic_recovery_enabled=config.automatic_recovery_enabled,
        topology_recovery_enabled=config.topology_recovery_enabled,
    )


def _named_plan(config: RabbitMQClientConfig) -> ConnectionPlan:
    name = config.client_provided_name
    if config.host_names:
        return _plan(
            config,
            "named_host_list",
            [
                _parameters(config, host, config.port, name)
                for host in config.host_names
            ],
            client_provided_name=name,
        )
    return _plan(
        config,
        "named_host",
        [_parameters(config, config.host_name, config.port, name)],
        client_provided_name=name,
    )


def _unnamed_plan(config: RabbitMQClientConfig) -> ConnectionPlan:
    if config.host_names:
        return _plan(
            config,
            "host_list",
            [_parameters(config, host, config.port) for host in config.host_names],
        )
    return _plan(config, "host", [_parameters(config, config.host_name, config.port)])


def resolve_connection_plan(
    config: RabbitMQClientConfig | None,
) -> ConnectionPlan | None:
    """
    Picks exactly one connection strategy for the given configuration.

    Precedence, first match wins:
        1. ``tcp_endpoints`` (each endpoint's own host and port; the client
           provided name, ``port``, ``host_name`` and ``host_names`` are
           ignored).
        2. ``client_provided_name`` with ``host_names``, else with
           ``host_name``.
        3. ``host_names``, else ``host_name``.

    Args:
        config: The client configuration, or None when RabbitMQ is disabled.

    Returns:
        The connection plan, or None if no configuration was given.
    """
    if config is None:
        return None

    if config.tcp_endpoints:
        return _plan(
            config,
            "endpoints",
            [
                _parameters(config, endpoint.host_name, endpoint.port)
                for endpoint in config.tcp_endpoints
            ],
        )

    if config.client_provided_name:
        return _named_plan(config)

    return _unnamed_plan(config)


def open_connection(
    plan: ConnectionPlan,
    connection_factory: ConnectionFactory = BlockingConnection,
) -> BlockingConnection:
    """
    Opens a blocking connection for a resolved plan.

    Raises:
        pika.exceptions.AMQPConnectionError: If no host accepts the connection
            (refused, authentication failure, timeout, name resolution).
    """
    try:
        connection = connection_factory(list(plan.parameters))
    except Exception:
        logger.exception(
            "Failed to connect to RabbitMQ",
            extra={
                "strategy": plan.strategy,
                "hosts": [f"{host}:{port}" for host, port in plan.hosts],
                "connection_name": plan.client_provided_name,
            },
        )
        raise

    logger.info(
        "Connected to RabbitMQ",
        extra={
            "strategy": plan.strategy,
            "connection_name": plan.client_provided_name,
        },
    )
    return connection


def resolve_connection(
    config: RabbitMQClientConfig | None,
    connection_factory: ConnectionFactory = BlockingConnection,
) -> BlockingConnection | None:
    """
    Resolves the connection strategy for ``config`` and opens the connection.

    Returns:
        An open connection, or None if ``config`` is None.
    """
    plan = resolve_connection_plan(config)
    if plan is None:
        logger.info("RabbitMQ configuration missing, connection disabled")
        return None
    return open_connection(plan, connection_factory)
