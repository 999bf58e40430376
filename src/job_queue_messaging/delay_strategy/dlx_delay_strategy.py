"""Delayed delivery through per-delay TTL queues that dead-letter into the destination."""

from __future__ import annotations

from typing import Set, Union
from weakref import WeakKeyDictionary

from job_queue_messaging.amqp_types import AmqpMessage, ExchangeSpec, QueueSpec
from job_queue_messaging.contracts import IBrokerContext, IDelayStrategy


class DlxDelayStrategy(IDelayStrategy):
    """Parks messages in a TTL queue whose dead-letter target is the real destination.

    One durable queue exists per destination, routing key and delay. Messages expire
    after ``delay_ms`` and RabbitMQ dead-letters them into the destination. Each delay
    queue is declared once per context.
    """

    def __init__(self) -> None:
        self._declared: WeakKeyDictionary[IBrokerContext, Set[str]] = WeakKeyDictionary()

    def delay_message(
        self,
        context: IBrokerContext,
        destination: Union[ExchangeSpec, QueueSpec],
        message: AmqpMessage,
        delay_ms: int,
    ) -> None:
        # x-death must not follow a re-delayed message into the TTL queue.
        headers = {key: value for key, value in message.headers.items() if key != "x-death"}
        delay_message = context.create_message(message.body, dict(message.properties), headers)
        delay_message.routing_key = message.routing_key

        if isinstance(destination, ExchangeSpec):
            routing_suffix = f".{message.routing_key}" if message.routing_key else ""
            delay_queue = QueueSpec(
                name=f"enqueue.{destination.name}{routing_suffix}.{delay_ms}.x.delay",
                arguments={
                    "x-message-ttl": delay_ms,
                    "x-dead-letter-exchange": destination.name,
                    "x-dead-letter-routing-key": message.routing_key,
                },
                durable=True,
            )
        else:
            delay_queue = QueueSpec(
                name=f"enqueue.{destination.name}.{delay_ms}.x.delay",
                arguments={
                    "x-message-ttl": delay_ms,
                    "x-dead-letter-exchange": "",
                    "x-dead-letter-routing-key": destination.name,
                },
                durable=True,
            )

        declared = self._declared.setdefault(context, set())
        if delay_queue.name not in declared:
            context.declare_queue(delay_queue)
            declared.add(delay_queue.name)

        context.create_producer().send(delay_queue, delay_message)
