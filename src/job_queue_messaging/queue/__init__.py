"""RabbitMQ job queue client."""

from .rabbitmq_queue import PUBLISH_ATTEMPTS, RabbitMQQueue, seconds_until
from .rabbitmq_queue_config import RabbitMQQueueDependencies
from .session_state import SessionState

__all__ = [
    "PUBLISH_ATTEMPTS",
    "RabbitMQQueue",
    "RabbitMQQueueDependencies",
    "SessionState",
    "seconds_until",
]
