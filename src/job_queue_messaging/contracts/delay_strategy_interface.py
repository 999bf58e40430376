"""Defines the contract for broker-native delayed delivery."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Union

from job_queue_messaging.amqp_types import AmqpMessage, ExchangeSpec, QueueSpec

if TYPE_CHECKING:
    from .broker_context_interface import IBrokerContext


class IDelayStrategy(ABC):
    """Publishes a message so that it reaches its destination after a delay."""

    @abstractmethod
    def delay_message(
        self,
        context: IBrokerContext,
        destination: Union[ExchangeSpec, QueueSpec],
        message: AmqpMessage,
        delay_ms: int,
    ) -> None:
        """Route ``message`` to ``destination`` once ``delay_ms`` milliseconds have elapsed."""


class IDelayStrategyAware(ABC):
    """Implemented by connection factories that accept a delay strategy."""

    @abstractmethod
    def set_delay_strategy(self, strategy: IDelayStrategy) -> None:
        """Install ``strategy`` on every context created afterwards."""
