"""Unit tests for exchange provisioning"""
from unittest.mock import MagicMock, call

import pytest
from pika.exceptions import ChannelClosedByBroker

from rabbitmq_wiring import ExchangeOptions, QueueOptions, provision_exchanges


class TestProvisionExchanges:
    """Test declarations issued on the channel"""

    def setup_method(self):
        self.channel = MagicMock()

    def test_exchange_without_queues(self, registry):
        registry.declare_exchange("events", ExchangeOptions(type="topic"))

        provision_exchanges(self.channel, registry.list_exchanges())

        self.channel.exchange_declare.assert_called_once_with(
            exchange="events",
            exchange_type="topic",
            durable=True,
            auto_delete=False,
            arguments={},
        )
        self.channel.queue_declare.assert_not_called()

    def test_queues_with_dead_letter_exchange(self, registry):
        registry.declare_exchange(
            "orders",
            ExchangeOptions(
                type="direct",
                dead_letter_exchange="orders.dlx",
                queues=[
                    QueueOptions(
                        name="orders.created",
                        routing_keys=["order.created", "order.updated"],
                        arguments={"x-queue-type": "quorum"},
                    ),
                    QueueOptions(name="orders.audit"),
                ],
            ),
        )

        provision_exchanges(self.channel, registry.list_exchanges())

        assert self.channel.exchange_declare.call_args_list == [
            call(
                exchange="orders.dlx",
                exchange_type="direct",
                durable=True,
                auto_delete=False,
            ),
            call(
                exchange="orders",
                exchange_type="direct",
                durable=True,
                auto_delete=False,
                arguments={},
            ),
        ]
        self.channel.queue_declare.assert_any_call(
            queue="orders.created",
            durable=True,
            exclusive=False,
            auto_delete=False,
            arguments={
                "x-queue-type": "quorum",
                "x-dead-letter-exchange": "orders.dlx",
            },
        )
        assert self.channel.queue_bind.call_args_list == [
            call(
                queue="orders.created", exchange="orders", routing_key="order.created"
            ),
            call(
                queue="orders.created", exchange="orders", routing_key="order.updated"
            ),
            call(queue="orders.audit", exchange="orders", routing_key="orders.audit"),
        ]

    def test_exchanges_provisioned_in_declaration_order(self, registry):
        registry.declare_exchange("first")
        registry.declare_exchange("second")

        provision_exchanges(self.channel, registry.list_exchanges())

        calls = self.channel.exchange_declare.call_args_list
        declared = [c.kwargs["exchange"] for c in calls]
        assert declared == ["first", "second"]

    def test_channel_errors_propagate(self, registry):
        registry.declare_exchange("events")
        self.channel.exchange_declare.side_effect = ChannelClosedByBroker(
            406, "PRECONDITION_FAILED"
        )

        with pytest.raises(ChannelClosedByBroker):
            provision_exchanges(self.channel, registry.list_exchanges())
