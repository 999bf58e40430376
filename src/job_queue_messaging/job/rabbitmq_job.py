"""Job wrapper around a message received from RabbitMQ."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from job_queue_messaging.amqp_types import AmqpMessage
from job_queue_messaging.contracts import Delay, IConsumer, IJob, IPayloadEncoder

if TYPE_CHECKING:
    from job_queue_messaging.queue import RabbitMQQueue

ATTEMPT_COUNT_HEADERS_KEY = "attempts_count"


class RabbitMQJob(IJob):
    """Routes acknowledgement and requeueing of one message back to its consumer and queue."""

    def __init__(
        self,
        *,
        queue: RabbitMQQueue,
        consumer: IConsumer,
        message: AmqpMessage,
        queue_name: str,
        payload_encoder: IPayloadEncoder,
    ) -> None:
        self.queue = queue
        self.consumer = consumer
        self.message = message
        self.queue_name = queue_name
        self.payload_encoder = payload_encoder
        self.logger = logging.getLogger(__name__)
        self._payload: Optional[Dict[str, Any]] = None
        self._deleted = False
        self._released = False
        self._failed = False

    def get_job_id(self) -> Optional[str]:
        return self.message.correlation_id

    def get_raw_body(self) -> bytes:
        return self.message.body

    def get_queue(self) -> str:
        return self.queue_name

    def payload(self) -> Dict[str, Any]:
        if self._payload is None:
            self._payload = self.payload_encoder.decode(self.message.body)
        return self._payload

    def get_name(self) -> Optional[str]:
        return self.payload().get("job")

    def attempts(self) -> int:
        """Number of attempts so far. A message without the attempt header is on its first."""
        return int(self.message.get_header(ATTEMPT_COUNT_HEADERS_KEY, 1))

    def delete(self) -> None:
        self._deleted = True
        self.consumer.acknowledge(self.message)

    def release(self, delay: Delay = 0) -> None:
        """Acknowledge this delivery and publish the body again with one more attempt."""
        self._released = True
        self.delete()

        correlation_id = self.queue.release(
            delay,
            self.get_raw_body(),
            None,
            self.queue_name,
            self.attempts() + 1,
        )
        if correlation_id is None:
            self.logger.error("Failed to release job %s back onto %s", self.get_job_id(), self.queue_name)

    def fail(self) -> None:
        self._failed = True
        self._deleted = True
        self.consumer.reject(self.message, requeue=False)

    def is_deleted(self) -> bool:
        return self._deleted

    def is_released(self) -> bool:
        return self._released

    def has_failed(self) -> bool:
        return self._failed
