"""Delayed delivery through the ``rabbitmq_delayed_message_exchange`` plugin."""

from __future__ import annotations

from typing import Set, Tuple, Union
from weakref import WeakKeyDictionary

from job_queue_messaging.amqp_types import AmqpMessage, ExchangeSpec, QueueSpec
from job_queue_messaging.contracts import IBrokerContext, IDelayStrategy

DELAY_HEADER = "x-delay"


class DelayedPluginDelayStrategy(IDelayStrategy):
    """Publishes through an ``x-delayed-message`` exchange bound to the destination.

    Requires the delayed message exchange plugin on the broker. The delay exchange and
    its binding are set up once per context.
    """

    def __init__(self) -> None:
        self._bound: WeakKeyDictionary[IBrokerContext, Set[Tuple[str, str, str]]] = WeakKeyDictionary()

    def delay_message(
        self,
        context: IBrokerContext,
        destination: Union[ExchangeSpec, QueueSpec],
        message: AmqpMessage,
        delay_ms: int,
    ) -> None:
        headers = dict(message.headers)
        headers[DELAY_HEADER] = delay_ms
        delay_message = context.create_message(message.body, dict(message.properties), headers)
        delay_message.routing_key = message.routing_key

        if isinstance(destination, ExchangeSpec):
            delay_exchange = ExchangeSpec(
                name=f"enqueue.{destination.name}.delayed",
                type="x-delayed-message",
                arguments={"x-delayed-type": destination.type},
                durable=True,
            )
            routing_key = message.routing_key
        else:
            delay_exchange = ExchangeSpec(
                name="enqueue.queue.delayed",
                type="x-delayed-message",
                arguments={"x-delayed-type": "direct"},
                durable=True,
            )
            routing_key = destination.name
            delay_message.routing_key = destination.name

        bound = self._bound.setdefault(context, set())
        binding = (delay_exchange.name, destination.name, routing_key)
        if binding not in bound:
            context.declare_exchange(delay_exchange)
            if isinstance(destination, ExchangeSpec):
                context.bind_exchange(destination, delay_exchange, routing_key)
            else:
                context.bind(destination, delay_exchange, routing_key)
            bound.add(binding)

        context.create_producer().send(delay_exchange, delay_message)
