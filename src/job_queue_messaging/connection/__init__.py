"""Pika implementations of the broker contracts."""

from .pika_connection_factory import PikaConnectionFactory
from .pika_context import PikaConsumer, PikaContext, PikaProducer

__all__ = ["PikaConnectionFactory", "PikaConsumer", "PikaContext", "PikaProducer"]
