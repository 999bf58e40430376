"""Configuration primitives for the RabbitMQ job queue."""

from .connection_spec import ConnectionSpec, SslParams, Timeouts
from .queue_options import (
    DEFAULT_QUEUE_NAME,
    RECEIVE_METHOD_BASIC_CONSUME,
    RECEIVE_METHOD_BASIC_GET,
    ExchangeOptions,
    QueueClientConfig,
    QueueOptions,
    ReceiveOptions,
)

__all__ = [
    "ConnectionSpec",
    "DEFAULT_QUEUE_NAME",
    "ExchangeOptions",
    "QueueClientConfig",
    "QueueOptions",
    "RECEIVE_METHOD_BASIC_CONSUME",
    "RECEIVE_METHOD_BASIC_GET",
    "ReceiveOptions",
    "SslParams",
    "Timeouts",
]
