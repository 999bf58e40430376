"""Defines the contract for an open broker session."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from job_queue_messaging.amqp_types import AmqpMessage, ExchangeSpec, QueueSpec

from .consumer_interface import IConsumer
from .delay_strategy_interface import IDelayStrategy
from .producer_interface import IProducer


class IBrokerContext(ABC):
    """An open connection and channel over which declarations, publishes and receives occur."""

    @abstractmethod
    def create_message(
        self,
        body: bytes,
        properties: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, Any]] = None,
    ) -> AmqpMessage:
        """Build a message bound for this context."""

    @abstractmethod
    def declare_exchange(self, exchange: ExchangeSpec) -> None:
        """Declare ``exchange`` on the broker."""

    @abstractmethod
    def declare_queue(self, queue: QueueSpec) -> int:
        """Declare ``queue`` on the broker and return its current message count."""

    @abstractmethod
    def bind(self, queue: QueueSpec, exchange: ExchangeSpec, routing_key: str) -> None:
        """Bind ``queue`` to ``exchange`` with ``routing_key``."""

    @abstractmethod
    def bind_exchange(self, target: ExchangeSpec, source: ExchangeSpec, routing_key: str) -> None:
        """Bind the ``target`` exchange to the ``source`` exchange with ``routing_key``."""

    @abstractmethod
    def create_producer(self) -> IProducer:
        """Return a producer publishing over this context."""

    @abstractmethod
    def create_consumer(self, queue: QueueSpec) -> IConsumer:
        """Return a consumer receiving from ``queue`` over this context."""

    @property
    @abstractmethod
    def delay_strategy(self) -> Optional[IDelayStrategy]:
        """Strategy used by producers of this context for delayed delivery."""

    @abstractmethod
    def close(self) -> None:
        """Close the channel and connection behind this context."""
