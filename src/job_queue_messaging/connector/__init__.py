"""Queue connector wiring configuration into a RabbitMQ queue."""

from .rabbitmq_connector import RabbitMQConnector

__all__ = ["RabbitMQConnector"]
