"""Shared pytest fixtures: an in-memory broker standing in for RabbitMQ."""

from collections import defaultdict, deque
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pika
import pytest

from job_queue_messaging.amqp_types import AmqpMessage, ExchangeSpec, QueueSpec
from job_queue_messaging.config import QueueClientConfig
from job_queue_messaging.contracts import IBrokerContext, IConsumer, IProducer
from job_queue_messaging.queue import RabbitMQQueue


class FakeBroker:
    """Records every call made against the contexts it builds.

    ``publish_failures``, ``receive_failures`` and ``declare_failures`` make the next N
    calls of that kind raise ``pika.exceptions.AMQPConnectionError``.
    """

    def __init__(self) -> None:
        self.contexts: List["FakeContext"] = []
        self.messages: Dict[str, deque] = defaultdict(deque)
        self.sent: List[Dict[str, Any]] = []
        self.exchange_declarations: List[ExchangeSpec] = []
        self.queue_declarations: List[QueueSpec] = []
        self.bindings: List[tuple] = []
        self.publish_failures = 0
        self.receive_failures = 0
        self.declare_failures = 0

    def build(self) -> "FakeContext":
        context = FakeContext(self)
        self.contexts.append(context)
        return context

    def enqueue(self, queue_name: str, body: bytes, **headers: Any) -> AmqpMessage:
        message = AmqpMessage(
            body=body,
            properties={"correlation_id": f"cid-{len(self.messages[queue_name])}"},
            headers=dict(headers),
            routing_key=queue_name,
            delivery_tag=len(self.messages[queue_name]) + 1,
        )
        self.messages[queue_name].append(message)
        return message

    @staticmethod
    def fail(kind: str) -> None:
        raise pika.exceptions.AMQPConnectionError(f"{kind} failed: connection lost")


class FakeProducer(IProducer):
    def __init__(self, context: "FakeContext") -> None:
        self.context = context
        self.delivery_delay: Optional[int] = None
        self.delay_calls: List[Optional[int]] = []

    def set_delivery_delay(self, delay_ms: Optional[int]) -> None:
        self.delay_calls.append(delay_ms)
        self.delivery_delay = delay_ms

    def get_delivery_delay(self) -> Optional[int]:
        return self.delivery_delay

    def send(self, destination, message: AmqpMessage) -> None:
        broker = self.context.broker
        if broker.publish_failures > 0:
            broker.publish_failures -= 1
            broker.fail("publish")

        broker.sent.append(
            {
                "context": self.context,
                "producer": self,
                "destination": destination,
                "message": message,
                "delay": self.delivery_delay,
            }
        )
        broker.messages[message.routing_key].append(message)


class FakeConsumer(IConsumer):
    def __init__(self, context: "FakeContext", queue: QueueSpec) -> None:
        self.context = context
        self.queue = queue
        self.receive_timeouts: List[int] = []
        self.no_wait_calls = 0
        self.acknowledged: List[AmqpMessage] = []
        self.rejected: List[tuple] = []

    def get_queue(self) -> QueueSpec:
        return self.queue

    def _next(self) -> Optional[AmqpMessage]:
        broker = self.context.broker
        if broker.receive_failures > 0:
            broker.receive_failures -= 1
            broker.fail("receive")
        pending = broker.messages[self.queue.name]
        return pending.popleft() if pending else None

    def receive(self, timeout_ms: int = 0) -> Optional[AmqpMessage]:
        self.receive_timeouts.append(timeout_ms)
        return self._next()

    def receive_no_wait(self) -> Optional[AmqpMessage]:
        self.no_wait_calls += 1
        return self._next()

    def acknowledge(self, message: AmqpMessage) -> None:
        self.acknowledged.append(message)

    def reject(self, message: AmqpMessage, requeue: bool = False) -> None:
        self.rejected.append((message, requeue))


class FakeContext(IBrokerContext):
    def __init__(self, broker: FakeBroker) -> None:
        self.broker = broker
        self.producers: List[FakeProducer] = []
        self.consumers: List[FakeConsumer] = []
        self.close_calls = 0

    @property
    def delay_strategy(self):
        return None

    def create_message(self, body, properties=None, headers=None) -> AmqpMessage:
        return AmqpMessage(body=body, properties=dict(properties or {}), headers=dict(headers or {}))

    def _maybe_fail_declare(self) -> None:
        if self.broker.declare_failures > 0:
            self.broker.declare_failures -= 1
            self.broker.fail("declare")

    def declare_exchange(self, exchange: ExchangeSpec) -> None:
        self._maybe_fail_declare()
        self.broker.exchange_declarations.append(exchange)

    def declare_queue(self, queue: QueueSpec) -> int:
        self._maybe_fail_declare()
        self.broker.queue_declarations.append(queue)
        return len(self.broker.messages[queue.name])

    def bind(self, queue: QueueSpec, exchange: ExchangeSpec, routing_key: str) -> None:
        self.broker.bindings.append((queue.name, exchange.name, routing_key))

    def bind_exchange(self, target: ExchangeSpec, source: ExchangeSpec, routing_key: str) -> None:
        self.broker.bindings.append((target.name, source.name, routing_key))

    def create_producer(self) -> FakeProducer:
        producer = FakeProducer(self)
        self.producers.append(producer)
        return producer

    def create_consumer(self, queue: QueueSpec) -> FakeConsumer:
        consumer = FakeConsumer(self, queue)
        self.consumers.append(consumer)
        return consumer

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def broker():
    return FakeBroker()


@pytest.fixture
def sleep():
    return Mock()


@pytest.fixture
def make_queue(broker, sleep):
    """Build a ``RabbitMQQueue`` over the fake broker from a config mapping."""

    def factory(config: Optional[Dict[str, Any]] = None, **kwargs: Any) -> RabbitMQQueue:
        return RabbitMQQueue(
            build_context=broker.build,
            config=QueueClientConfig.from_config(config or {}),
            sleep=sleep,
            **kwargs,
        )

    return factory
