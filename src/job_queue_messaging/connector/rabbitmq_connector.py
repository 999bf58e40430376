"""Connects a configuration mapping to a ready-to-use RabbitMQ queue."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from job_queue_messaging.config import ConnectionSpec, QueueClientConfig
from job_queue_messaging.context_builder import ContextBuilder
from job_queue_messaging.contracts import IEventDispatcher, IPayloadEncoder
from job_queue_messaging.events import WorkerStopping
from job_queue_messaging.exceptions import ConfigurationError
from job_queue_messaging.payload_encoder import JSONPayloadEncoder
from job_queue_messaging.queue import RabbitMQQueue


class RabbitMQConnector:
    """Builds a ``RabbitMQQueue`` and ties its context to the worker lifecycle.

    Example configuration::

        {
            "factory_class": "pika",
            "host": "rabbitmq", "port": 5672, "vhost": "/",
            "login": "guest", "password": "guest",
            "options": {
                "queue": {"name": "default", "arguments": '{"x-max-priority": 10}'},
                "exchange": {"name": "", "type": "direct"},
            },
            "receive": {"method": "basic_get"},
            "sleep_on_error": 5,
        }
    """

    def __init__(
        self,
        dispatcher: IEventDispatcher,
        *,
        payload_encoder: Optional[IPayloadEncoder] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.payload_encoder = payload_encoder or JSONPayloadEncoder()
        self.logger = logger or logging.getLogger(__name__)

    def connect(self, config: Mapping[str, Any]) -> RabbitMQQueue:
        if "factory_class" not in config:
            raise ConfigurationError("The factory_class option is missing though it is required.")

        builder = ContextBuilder(ConnectionSpec.from_config(config))
        queue_config = QueueClientConfig.from_config(config)

        queue = RabbitMQQueue(
            build_context=builder,
            config=queue_config,
            context=builder.build(),
            payload_encoder=self.payload_encoder,
        )

        def close_on_stop(event: WorkerStopping) -> None:
            self.logger.info("Worker stopping, closing RabbitMQ context.")
            queue.close()

        self.dispatcher.listen(WorkerStopping, close_on_stop)
        self.logger.info("RabbitMQ queue %s ready.", queue_config.queue.name)
        return queue
