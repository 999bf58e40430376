"""Defines the contract for receiving messages from a queue."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from job_queue_messaging.amqp_types import AmqpMessage, QueueSpec


class IConsumer(ABC):
    """Receives messages from a single queue on one broker context."""

    @abstractmethod
    def get_queue(self) -> QueueSpec:
        """Return the queue this consumer is bound to."""

    @abstractmethod
    def receive(self, timeout_ms: int = 0) -> Optional[AmqpMessage]:
        """Block up to ``timeout_ms`` milliseconds for the next message."""

    @abstractmethod
    def receive_no_wait(self) -> Optional[AmqpMessage]:
        """Return the next message if one is immediately available."""

    @abstractmethod
    def acknowledge(self, message: AmqpMessage) -> None:
        """Acknowledge a received message."""

    @abstractmethod
    def reject(self, message: AmqpMessage, requeue: bool = False) -> None:
        """Reject a received message, optionally putting it back on the queue."""
