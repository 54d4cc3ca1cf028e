from rabbitmq_wiring.config import (
    ExchangeOptions,
    QueueOptions,
    RabbitMQClientConfig,
    TcpEndpoint,
    load_client_config,
)
from rabbitmq_wiring.connection import (
    ConnectionPlan,
    open_connection,
    resolve_connection,
    resolve_connection_plan,
)
from rabbitmq_wiring.exceptions import DuplicateExchangeError, InvalidHandlerError
from rabbitmq_wiring.infrastructure import MessageHandler
from rabbitmq_wiring.logging import setup_logging
from rabbitmq_wiring.provisioning import provision_exchange, provision_exchanges
from rabbitmq_wiring.registry import Exchange, HandlerBinding, RegistrationRegistry

__all__ = [
    "setup_logging",
    "DuplicateExchangeError",
    "InvalidHandlerError",
    "ExchangeOptions",
    "QueueOptions",
    "RabbitMQClientConfig",
    "TcpEndpoint",
    "load_client_config",
    "ConnectionPlan",
    "open_connection",
    "resolve_connection",
    "resolve_connection_plan",
    "MessageHandler",
    "provision_exchange",
    "provision_exchanges",
    "Exchange",
    "HandlerBinding",
    "RegistrationRegistry",
]
