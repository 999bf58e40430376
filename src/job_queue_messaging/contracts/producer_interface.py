"""Defines the contract for publishing messages on a broker context."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Union

from job_queue_messaging.amqp_types import AmqpMessage, ExchangeSpec, QueueSpec


class IProducer(ABC):
    """Sends messages to an exchange, or to a queue through the default exchange."""

    @abstractmethod
    def set_delivery_delay(self, delay_ms: Optional[int]) -> None:
        """Defer visibility of the next sent messages by ``delay_ms`` milliseconds."""

    @abstractmethod
    def get_delivery_delay(self) -> Optional[int]:
        """Return the configured delivery delay in milliseconds, if any."""

    @abstractmethod
    def send(self, destination: Union[ExchangeSpec, QueueSpec], message: AmqpMessage) -> None:
        """Publish ``message`` to ``destination``."""
