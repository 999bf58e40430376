"""Connection factory opening blocking pika connections."""

from __future__ import annotations

import logging
import ssl
from typing import Any, Mapping, Optional

import pika
from pika.connection import Parameters

from job_queue_messaging.contracts import IConnectionFactory, IDelayStrategy, IDelayStrategyAware
from job_queue_messaging.exceptions import ConfigurationError

from .pika_context import PikaContext


def build_ssl_context(config: Mapping[str, Any]) -> ssl.SSLContext:
    context = ssl.create_default_context(cafile=config.get("ssl_cacert"))
    if config.get("ssl_cert"):
        context.load_cert_chain(
            config["ssl_cert"],
            keyfile=config.get("ssl_key"),
            password=config.get("ssl_passphrase"),
        )
    if not config.get("ssl_verify", True):
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def build_parameters(config: Mapping[str, Any]) -> Parameters:
    dsn = config.get("dsn")
    if dsn:
        try:
            return pika.URLParameters(dsn)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid RabbitMQ DSN provided: {dsn}") from exc

    ssl_options = None
    if config.get("ssl_on"):
        ssl_options = pika.SSLOptions(build_ssl_context(config), server_hostname=config.get("host"))

    return pika.ConnectionParameters(
        host=config.get("host", "127.0.0.1"),
        port=config.get("port", 5672),
        virtual_host=config.get("vhost", "/"),
        credentials=pika.PlainCredentials(config.get("user", "guest"), config.get("pass", "guest")),
        heartbeat=config.get("heartbeat", 0),
        socket_timeout=config.get("read_timeout") or None,
        blocked_connection_timeout=config.get("write_timeout") or None,
        ssl_options=ssl_options,
    )


class PikaConnectionFactory(IConnectionFactory, IDelayStrategyAware):
    """Creates ``PikaContext`` instances over fresh blocking connections."""

    def __init__(self, config: Mapping[str, Any]) -> None:
        self.config = dict(config)
        self._parameters = build_parameters(self.config)
        self._delay_strategy: Optional[IDelayStrategy] = None
        self.logger = logging.getLogger(__name__)

    def set_delay_strategy(self, strategy: IDelayStrategy) -> None:
        self._delay_strategy = strategy

    def create_context(self) -> PikaContext:
        self.logger.info("Connecting to RabbitMQ at %s", self._describe_target())
        try:
            connection = pika.BlockingConnection(self._parameters)
        except pika.exceptions.AMQPConnectionError as exc:
            self.logger.error("Failed to establish RabbitMQ connection: %s", exc)
            raise

        channel = connection.channel()
        self.logger.info("Connected to RabbitMQ.")
        return PikaContext(connection, channel, delay_strategy=self._delay_strategy)

    def _describe_target(self) -> str:
        if self.config.get("dsn"):
            return "configured DSN"
        return f"{self.config.get('host')}:{self.config.get('port')}{self.config.get('vhost')}"
