"""RabbitMQ implementation of the job queue contract."""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Mapping, Optional, Tuple

from job_queue_messaging.amqp_types import (
    DEFAULT_CONTENT_TYPE,
    DELIVERY_MODE_PERSISTENT,
    ExchangeSpec,
    QueueSpec,
)
from job_queue_messaging.config import QueueClientConfig
from job_queue_messaging.contracts import Delay, IBrokerContext, IConsumer, IPayloadEncoder, IQueue
from job_queue_messaging.exceptions import (
    ConfigurationError,
    DeliveryDelayNotSupportedError,
    TransportError,
)
from job_queue_messaging.job import ATTEMPT_COUNT_HEADERS_KEY, RabbitMQJob
from job_queue_messaging.payload_encoder import JSONPayloadEncoder

from .rabbitmq_queue_config import RabbitMQQueueDependencies
from .session_state import SessionState

PUBLISH_ATTEMPTS = 2

# Raised straight to the caller instead of being treated as a broker failure.
_NON_TRANSPORT_ERRORS = (ConfigurationError, DeliveryDelayNotSupportedError)


def seconds_until(delay: Delay) -> float:
    """Convert a relative or absolute delay into a non-negative number of seconds."""
    if isinstance(delay, datetime):
        seconds = (delay - datetime.now(tz=delay.tzinfo)).total_seconds()
    elif isinstance(delay, timedelta):
        seconds = delay.total_seconds()
    else:
        seconds = float(delay)
    return max(0.0, seconds)


class RabbitMQQueue(IQueue):
    """Pushes and pops jobs through a RabbitMQ exchange and queue pair.

    The broker context is built lazily through ``build_context`` and rebuilt by
    ``reconnect()``. Exchange, queue and binding are declared once per queue name and
    context; consumers are likewise opened once per queue name and context.

    Publishing retries once after reconnecting. Receiving and size queries are never
    retried. Failures that survive are logged and followed by a ``sleep_on_error`` pause,
    or raised as ``TransportError`` when ``sleep_on_error`` is ``False``.
    """

    def __init__(
        self,
        *,
        build_context: Callable[[], IBrokerContext],
        config: QueueClientConfig,
        context: Optional[IBrokerContext] = None,
        payload_encoder: Optional[IPayloadEncoder] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.config = config
        self.payload_encoder = payload_encoder or JSONPayloadEncoder()
        self._build_context = build_context
        self._sleep = sleep
        self._epoch = 0
        self._session: Optional[SessionState] = None
        self._correlation_id: Optional[str] = None

        if context is not None:
            self._session = self._start_session(context)

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        *,
        dependencies: Optional[RabbitMQQueueDependencies] = None,
    ) -> RabbitMQQueue:
        deps = dependencies or RabbitMQQueueDependencies()

        return cls(
            build_context=deps.make_context_builder(config),
            config=QueueClientConfig.from_config(config),
            payload_encoder=deps.make_payload_encoder(),
            sleep=deps.sleep,
        )

    @property
    def epoch(self) -> int:
        """Number of broker contexts this queue has started."""
        return self._epoch

    def get_context(self) -> IBrokerContext:
        return self._current_session().context

    def reconnect(self) -> None:
        previous, self._session = self._session, None
        self._correlation_id = None

        if previous is not None:
            try:
                previous.context.close()
            except Exception as exc:
                self.logger.warning("Ignoring error while closing stale RabbitMQ context: %s", exc)

        self.logger.info("Reconnecting to RabbitMQ.")
        self._session = self._start_session(self._build_context())

    def close(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            session.context.close()

    def size(self, queue_name: Optional[str] = None) -> Optional[int]:
        try:
            queue, _ = self._declare_everything_once(queue_name)
            return self.get_context().declare_queue(queue)
        except _NON_TRANSPORT_ERRORS:
            raise
        except Exception as exc:
            self.report_connection_error("size", exc)

        return None

    def push(self, job: Any, data: Any = None, queue_name: Optional[str] = None) -> Optional[str]:
        return self.push_raw(self.payload_encoder.encode(job, data), queue_name, {})

    def push_raw(
        self,
        payload: bytes,
        queue_name: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        options = options or {}

        for attempt in range(1, PUBLISH_ATTEMPTS + 1):
            try:
                if attempt > 1:
                    self.reconnect()
                return self._publish(payload, queue_name, options)
            except _NON_TRANSPORT_ERRORS:
                raise
            except Exception as exc:
                if attempt < PUBLISH_ATTEMPTS:
                    self.logger.warning("Publishing to RabbitMQ failed, reconnecting: %s", exc)
                    continue

                self.report_connection_error("push_raw", exc)

        return None

    def later(
        self,
        delay: Delay,
        job: Any,
        data: Any = None,
        queue_name: Optional[str] = None,
    ) -> Optional[str]:
        return self.push_raw(
            self.payload_encoder.encode(job, data),
            queue_name,
            {"delay": seconds_until(delay)},
        )

    def release(
        self,
        delay: Delay,
        job: Any,
        data: Any,
        queue_name: Optional[str],
        attempts: int = 0,
    ) -> Optional[str]:
        return self.push_raw(
            self.payload_encoder.encode(job, data),
            queue_name,
            {"delay": seconds_until(delay), "attempts": attempts},
        )

    def pop(self, queue_name: Optional[str] = None) -> Optional[RabbitMQJob]:
        try:
            queue, _ = self._declare_everything_once(queue_name)
            consumer = self._create_consumer_once(queue)

            receive = self.config.receive
            if receive.blocking:
                message = consumer.receive(receive.timeout)
            else:
                message = consumer.receive_no_wait()

            if message is not None:
                return RabbitMQJob(
                    queue=self,
                    consumer=consumer,
                    message=message,
                    queue_name=queue.name,
                    payload_encoder=self.payload_encoder,
                )
        except _NON_TRANSPORT_ERRORS:
            raise
        except Exception as exc:
            self.report_connection_error("pop", exc)

        return None

    def get_correlation_id(self) -> str:
        """Return the configured correlation id, or a freshly generated one."""
        return self._correlation_id or uuid.uuid4().hex

    def set_correlation_id(self, correlation_id: str) -> None:
        self._correlation_id = correlation_id

    def report_connection_error(self, action: str, exc: Exception) -> None:
        self.logger.error("AMQP error while attempting %s: %s", action, exc)

        if self.config.fail_fast:
            raise TransportError("Error writing data to the connection with RabbitMQ") from exc

        self._sleep(self.config.sleep_on_error)

    def _publish(self, payload: bytes, queue_name: Optional[str], options: Mapping[str, Any]) -> Optional[str]:
        queue, exchange = self._declare_everything_once(queue_name)
        context = self.get_context()

        message = context.create_message(payload)
        message.routing_key = queue.name
        message.correlation_id = self.get_correlation_id()
        message.content_type = DEFAULT_CONTENT_TYPE
        message.delivery_mode = DELIVERY_MODE_PERSISTENT

        if options.get("attempts") is not None:
            message.set_header(ATTEMPT_COUNT_HEADERS_KEY, options["attempts"])

        producer = context.create_producer()
        delay = options.get("delay")
        if delay is not None and delay > 0:
            producer.set_delivery_delay(int(delay * 1000))

        producer.send(exchange, message)

        return message.correlation_id

    def _current_session(self) -> SessionState:
        if self._session is None:
            self._session = self._start_session(self._build_context())
        return self._session

    def _start_session(self, context: IBrokerContext) -> SessionState:
        self._epoch += 1
        return SessionState(context=context, epoch=self._epoch)

    def _resolve_queue_name(self, queue_name: Optional[str]) -> str:
        return queue_name or self.config.queue.name

    def _declare_everything_once(self, queue_name: Optional[str] = None) -> Tuple[QueueSpec, ExchangeSpec]:
        session = self._current_session()
        name = self._resolve_queue_name(queue_name)

        if name not in session.declarations:
            session.declarations[name] = self._declare_everything(session, name)
        return session.declarations[name]

    def _declare_everything(self, session: SessionState, queue_name: str) -> Tuple[QueueSpec, ExchangeSpec]:
        queue_options = self.config.queue
        exchange_options = self.config.exchange
        exchange_name = exchange_options.name or queue_name
        context = session.context

        exchange = ExchangeSpec(
            name=exchange_name,
            type=exchange_options.type,
            arguments=dict(exchange_options.arguments),
            passive=exchange_options.passive,
            durable=exchange_options.durable,
            auto_delete=exchange_options.auto_delete,
        )
        if exchange_options.declare and exchange_name not in session.declared_exchanges:
            context.declare_exchange(exchange)
            session.declared_exchanges.add(exchange_name)

        queue = QueueSpec(
            name=queue_name,
            arguments=dict(queue_options.arguments),
            passive=queue_options.passive,
            durable=queue_options.durable,
            exclusive=queue_options.exclusive,
            auto_delete=queue_options.auto_delete,
        )
        if queue_options.declare and queue_name not in session.declared_queues:
            context.declare_queue(queue)
            session.declared_queues.add(queue_name)

        if queue_options.bind:
            context.bind(queue, exchange, queue.name)

        self.logger.debug(
            "Declared queue %s on exchange %s (epoch %s)", queue_name, exchange_name, session.epoch
        )
        return queue, exchange

    def _create_consumer_once(self, queue: QueueSpec) -> IConsumer:
        session = self._current_session()
        if queue.name not in session.consumers:
            session.consumers[queue.name] = session.context.create_consumer(queue)
        return session.consumers[queue.name]
