"""Configuration primitives for wiring a `RabbitMQQueue`."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from job_queue_messaging.config import ConnectionSpec
from job_queue_messaging.context_builder import ContextBuilder
from job_queue_messaging.contracts import IBrokerContext, IPayloadEncoder
from job_queue_messaging.payload_encoder import JSONPayloadEncoder


def default_context_builder(config: Mapping[str, Any]) -> Callable[[], IBrokerContext]:
    return ContextBuilder(ConnectionSpec.from_config(config))


@dataclass(frozen=True)
class RabbitMQQueueDependencies:
    """Bundles factory functions used when building a queue from a config mapping."""

    make_context_builder: Callable[[Mapping[str, Any]], Callable[[], IBrokerContext]] = field(
        default=default_context_builder
    )
    make_payload_encoder: Callable[[], IPayloadEncoder] = field(default=JSONPayloadEncoder)
    sleep: Callable[[float], None] = field(default=time.sleep)
