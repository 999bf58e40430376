"""State that is only valid for the lifetime of one broker context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Set, Tuple

from job_queue_messaging.amqp_types import ExchangeSpec, QueueSpec
from job_queue_messaging.contracts import IBrokerContext, IConsumer


@dataclass
class SessionState:
    """A broker context together with everything declared or opened on it.

    Declarations and consumers are scoped to the context that created them, so the
    whole object is dropped and replaced when the queue client reconnects.
    """

    context: IBrokerContext
    epoch: int
    declarations: Dict[str, Tuple[QueueSpec, ExchangeSpec]] = field(default_factory=dict)
    declared_exchanges: Set[str] = field(default_factory=set)
    declared_queues: Set[str] = field(default_factory=set)
    consumers: Dict[str, IConsumer] = field(default_factory=dict)
