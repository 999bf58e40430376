"""Contract interfaces for job queue messaging."""

from .broker_context_interface import IBrokerContext
from .connection_factory_interface import IConnectionFactory
from .consumer_interface import IConsumer
from .delay_strategy_interface import IDelayStrategy, IDelayStrategyAware
from .event_dispatcher_interface import IEventDispatcher
from .job_interface import IJob
from .payload_encoder_interface import IPayloadEncoder
from .producer_interface import IProducer
from .queue_interface import Delay, IQueue

__all__ = [
    "Delay",
    "IBrokerContext",
    "IConnectionFactory",
    "IConsumer",
    "IDelayStrategy",
    "IDelayStrategyAware",
    "IEventDispatcher",
    "IJob",
    "IPayloadEncoder",
    "IProducer",
    "IQueue",
]
