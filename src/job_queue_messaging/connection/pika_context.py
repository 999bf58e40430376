"""Broker context, producer and consumer backed by a blocking pika channel."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Optional, Tuple, Union

import pika
from pika.adapters.blocking_connection import BlockingChannel, BlockingConnection

from job_queue_messaging.amqp_types import AmqpMessage, ExchangeSpec, QueueSpec
from job_queue_messaging.contracts import IBrokerContext, IConsumer, IDelayStrategy, IProducer
from job_queue_messaging.exceptions import DeliveryDelayNotSupportedError

BASIC_PROPERTY_NAMES = (
    "content_type",
    "content_encoding",
    "delivery_mode",
    "priority",
    "correlation_id",
    "reply_to",
    "expiration",
    "message_id",
    "timestamp",
    "type",
    "user_id",
    "app_id",
)

_Delivery = Tuple[Any, Optional[pika.BasicProperties], Optional[bytes]]


def to_basic_properties(message: AmqpMessage) -> pika.BasicProperties:
    properties = {
        name: value
        for name, value in message.properties.items()
        if name in BASIC_PROPERTY_NAMES and value is not None
    }
    return pika.BasicProperties(headers=dict(message.headers) or None, **properties)


def from_delivery(method: Any, properties: Optional[pika.BasicProperties], body: bytes) -> AmqpMessage:
    message_properties: Dict[str, Any] = {}
    headers: Dict[str, Any] = {}
    if properties is not None:
        for name in BASIC_PROPERTY_NAMES:
            value = getattr(properties, name, None)
            if value is not None:
                message_properties[name] = value
        headers = dict(properties.headers or {})

    return AmqpMessage(
        body=body,
        properties=message_properties,
        headers=headers,
        routing_key=method.routing_key,
        delivery_tag=method.delivery_tag,
        redelivered=bool(method.redelivered),
    )


class PikaContext(IBrokerContext):
    """Owns one blocking connection and the channel opened on it."""

    def __init__(
        self,
        connection: BlockingConnection,
        channel: BlockingChannel,
        delay_strategy: Optional[IDelayStrategy] = None,
    ) -> None:
        self.connection = connection
        self.channel = channel
        self._delay_strategy = delay_strategy
        self.logger = logging.getLogger(__name__)

    @property
    def delay_strategy(self) -> Optional[IDelayStrategy]:
        return self._delay_strategy

    def create_message(
        self,
        body: bytes,
        properties: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, Any]] = None,
    ) -> AmqpMessage:
        return AmqpMessage(body=body, properties=dict(properties or {}), headers=dict(headers or {}))

    def declare_exchange(self, exchange: ExchangeSpec) -> None:
        self.logger.debug("Declaring exchange %s (%s)", exchange.name, exchange.type)
        self.channel.exchange_declare(
            exchange=exchange.name,
            exchange_type=exchange.type,
            passive=exchange.passive,
            durable=exchange.durable,
            auto_delete=exchange.auto_delete,
            arguments=exchange.arguments or None,
        )

    def declare_queue(self, queue: QueueSpec) -> int:
        self.logger.debug("Declaring queue %s", queue.name)
        result = self.channel.queue_declare(
            queue=queue.name,
            passive=queue.passive,
            durable=queue.durable,
            exclusive=queue.exclusive,
            auto_delete=queue.auto_delete,
            arguments=queue.arguments or None,
        )
        return int(result.method.message_count)

    def bind(self, queue: QueueSpec, exchange: ExchangeSpec, routing_key: str) -> None:
        self.channel.queue_bind(queue=queue.name, exchange=exchange.name, routing_key=routing_key)

    def bind_exchange(self, target: ExchangeSpec, source: ExchangeSpec, routing_key: str) -> None:
        self.channel.exchange_bind(
            destination=target.name,
            source=source.name,
            routing_key=routing_key,
        )

    def basic_publish(self, exchange: str, routing_key: str, message: AmqpMessage) -> None:
        self.channel.basic_publish(
            exchange=exchange,
            routing_key=routing_key,
            body=message.body,
            properties=to_basic_properties(message),
        )

    def create_producer(self) -> PikaProducer:
        return PikaProducer(self)

    def create_consumer(self, queue: QueueSpec) -> PikaConsumer:
        return PikaConsumer(self, queue)

    def close(self) -> None:
        try:
            if self.channel and not self.channel.is_closed:
                self.channel.close()
                self.logger.info("Closed RabbitMQ channel.")
        finally:
            if self.connection and not self.connection.is_closed:
                self.connection.close()
                self.logger.info("Closed RabbitMQ connection.")


class PikaProducer(IProducer):
    """Publishes messages over a ``PikaContext``."""

    def __init__(self, context: PikaContext) -> None:
        self._context = context
        self._delivery_delay: Optional[int] = None

    def set_delivery_delay(self, delay_ms: Optional[int]) -> None:
        self._delivery_delay = delay_ms

    def get_delivery_delay(self) -> Optional[int]:
        return self._delivery_delay

    def send(self, destination: Union[ExchangeSpec, QueueSpec], message: AmqpMessage) -> None:
        if self._delivery_delay:
            strategy = self._context.delay_strategy
            if strategy is None:
                raise DeliveryDelayNotSupportedError(
                    "Delivery delay requires a delay strategy on the connection factory."
                )
            strategy.delay_message(self._context, destination, message, self._delivery_delay)
            return

        if isinstance(destination, ExchangeSpec):
            self._context.basic_publish(destination.name, message.routing_key, message)
        else:
            self._context.basic_publish("", destination.name, message)


class PikaConsumer(IConsumer):
    """Receives messages from one queue over a ``PikaContext``."""

    def __init__(self, context: PikaContext, queue: QueueSpec) -> None:
        self._context = context
        self._queue = queue
        self._deliveries: Optional[Iterator[_Delivery]] = None

    def get_queue(self) -> QueueSpec:
        return self._queue

    def receive(self, timeout_ms: int = 0) -> Optional[AmqpMessage]:
        # pika allows one consume generator per queue and channel, so the first timeout sticks.
        if self._deliveries is None:
            self._deliveries = self._context.channel.consume(
                queue=self._queue.name,
                auto_ack=False,
                inactivity_timeout=timeout_ms / 1000 if timeout_ms > 0 else None,
            )

        method, properties, body = next(self._deliveries)
        if method is None:
            return None
        return from_delivery(method, properties, body or b"")

    def receive_no_wait(self) -> Optional[AmqpMessage]:
        method, properties, body = self._context.channel.basic_get(queue=self._queue.name, auto_ack=False)
        if method is None:
            return None
        return from_delivery(method, properties, body or b"")

    def acknowledge(self, message: AmqpMessage) -> None:
        self._context.channel.basic_ack(delivery_tag=message.delivery_tag)

    def reject(self, message: AmqpMessage, requeue: bool = False) -> None:
        self._context.channel.basic_reject(delivery_tag=message.delivery_tag, requeue=requeue)
