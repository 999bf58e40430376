"""Builds broker contexts from a ``ConnectionSpec``."""

from __future__ import annotations

import importlib
import logging
from typing import Any, Dict, Optional, Type, Union

from job_queue_messaging.config import ConnectionSpec
from job_queue_messaging.connection import PikaConnectionFactory
from job_queue_messaging.contracts import IBrokerContext, IConnectionFactory, IDelayStrategy, IDelayStrategyAware
from job_queue_messaging.delay_strategy import DELAY_STRATEGIES
from job_queue_messaging.exceptions import ConfigurationError

CONNECTION_FACTORIES: Dict[str, Type[IConnectionFactory]] = {
    "pika": PikaConnectionFactory,
}


def register_connection_factory(name: str, factory_class: Type[IConnectionFactory]) -> None:
    """Make ``factory_class`` resolvable by ``name`` in ``factory_class`` settings."""
    if not (isinstance(factory_class, type) and issubclass(factory_class, IConnectionFactory)):
        raise ConfigurationError(f"{factory_class!r} does not implement IConnectionFactory.")
    CONNECTION_FACTORIES[name] = factory_class


def resolve_factory_class(identifier: Union[str, Type[Any]]) -> Type[IConnectionFactory]:
    """Resolve a registered name, a dotted import path or a class into a factory class."""
    candidate: Any = identifier
    if isinstance(identifier, str):
        candidate = CONNECTION_FACTORIES.get(identifier) or _import_class(identifier)

    if not (isinstance(candidate, type) and issubclass(candidate, IConnectionFactory)):
        raise ConfigurationError(
            f'The factory_class option has to be a valid class that implements "{IConnectionFactory.__name__}", '
            f"got {identifier!r}."
        )
    return candidate


def _import_class(path: str) -> Any:
    module_name, separator, attribute = path.partition(":")
    if not separator:
        module_name, _, attribute = path.rpartition(".")
    if not module_name or not attribute:
        raise ConfigurationError(f"Unknown connection factory: {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import connection factory module {module_name!r}.") from exc

    try:
        return getattr(module, attribute)
    except AttributeError as exc:
        raise ConfigurationError(f"Module {module_name!r} has no attribute {attribute!r}.") from exc


class ContextBuilder:
    """Creates a fresh broker context on every call.

    The factory class and delay strategy are resolved when the builder is constructed, so
    configuration mistakes surface immediately. Errors raised while the factory opens the
    connection propagate to the caller unchanged.
    """

    def __init__(self, spec: ConnectionSpec, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.spec = spec
        self.factory_class = resolve_factory_class(spec.factory_class)

        strategy_class = DELAY_STRATEGIES.get(spec.delay_strategy)
        if strategy_class is None:
            raise ConfigurationError(f"Unknown delay strategy: {spec.delay_strategy!r}")
        self.delay_strategy_class: Type[IDelayStrategy] = strategy_class

    def build(self) -> IBrokerContext:
        factory = self.factory_class(self.spec.to_factory_config())
        if isinstance(factory, IDelayStrategyAware):
            factory.set_delay_strategy(self.delay_strategy_class())

        self.logger.debug("Creating broker context with %s", self.factory_class.__name__)
        return factory.create_context()

    def __call__(self) -> IBrokerContext:
        return self.build()
