"""Job wrapper for received RabbitMQ messages."""

from .rabbitmq_job import ATTEMPT_COUNT_HEADERS_KEY, RabbitMQJob

__all__ = ["ATTEMPT_COUNT_HEADERS_KEY", "RabbitMQJob"]
