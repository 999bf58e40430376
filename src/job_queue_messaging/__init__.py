"""Job queue client backed by RabbitMQ, exposing a transport-agnostic queue contract."""

from .amqp_types import AmqpMessage, ExchangeSpec, QueueSpec
from .config import ConnectionSpec, QueueClientConfig
from .connection import PikaConnectionFactory
from .connector import RabbitMQConnector
from .context_builder import ContextBuilder, register_connection_factory
from .contracts import IBrokerContext, IConnectionFactory, IQueue
from .events import EventDispatcher, WorkerStopping
from .exceptions import (
    ConfigurationError,
    DeliveryDelayNotSupportedError,
    QueueMessagingError,
    TransportError,
)
from .job import RabbitMQJob
from .queue import RabbitMQQueue, RabbitMQQueueDependencies

__all__ = [
    "AmqpMessage",
    "ConfigurationError",
    "ConnectionSpec",
    "ContextBuilder",
    "DeliveryDelayNotSupportedError",
    "EventDispatcher",
    "ExchangeSpec",
    "IBrokerContext",
    "IConnectionFactory",
    "IQueue",
    "PikaConnectionFactory",
    "QueueClientConfig",
    "QueueMessagingError",
    "QueueSpec",
    "RabbitMQConnector",
    "RabbitMQJob",
    "RabbitMQQueue",
    "RabbitMQQueueDependencies",
    "TransportError",
    "WorkerStopping",
    "register_connection_factory",
]
