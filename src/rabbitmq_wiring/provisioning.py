"""Declares registered exchanges, queues and bindings on a channel."""

import logging
from collections.abc import Iterable

from pika.adapters.blocking_connection import BlockingChannel

from rabbitmq_wiring.config import QueueOptions
from rabbitmq_wiring.registry import Exchange

logger = logging.getLogger(__name__)


def _declare_queue(
    channel: BlockingChannel,
    exchange: Exchange,
    queue: QueueOptions,
) -> None:
    arguments = dict(queue.arguments)
    if exchange.options.dead_letter_exchange:
        arguments.setdefault(
            "x-dead-letter-exchange", exchange.options.dead_letter_exchange
        )

    channel.queue_declare(
        queue=queue.name,
        durable=queue.durable,
        exclusive=queue.exclusive,
        auto_delete=queue.auto_delete,
        arguments=arguments,
    )

    # A queue without routing keys is bound by its own name.
    for routing_key in queue.routing_keys or [queue.name]:
        channel.queue_bind(
            queue=queue.name,
            exchange=exchange.name,
            routing_key=routing_key,
        )


def provision_exchange(channel: BlockingChannel, exchange: Exchange) -> None:
    """Sets up the dead-letter exchange, the exchange, its queues and bindings."""
    options = exchange.options

    if options.queues and options.dead_letter_exchange:
        channel.exchange_declare(
            exchange=options.dead_letter_exchange,
            exchange_type=options.dead_letter_exchange_type,
            durable=options.durable,
            auto_delete=options.auto_delete,
        )

    channel.exchange_declare(
        exchange=exchange.name,
        exchange_type=options.type,
        durable=options.durable,
        auto_delete=options.auto_delete,
        arguments=dict(options.arguments),
    )

    for queue in options.queues:
        _declare_queue(channel, exchange, queue)

    logger.info(
        "Exchange infrastructure ready",
        extra={
            "exchange": exchange.name,
            "queues": [queue.name for queue in options.queues],
        },
    )


def provision_exchanges(
    channel: BlockingChannel, exchanges: Iterable[Exchange]
) -> None:
    """
    Declares every exchange in order on ``channel``.

    Args:
        channel: An open channel.
        exchanges: Typically ``RegistrationRegistry.list_exchanges()``.

    Raises:
        pika.exceptions.AMQPChannelError: If the broker rejects a declaration.
    """
    for exchange in exchanges:
        provision_exchange(channel, exchange)
