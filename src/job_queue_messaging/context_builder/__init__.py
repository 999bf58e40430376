"""Broker context construction."""

from .context_builder import (
    CONNECTION_FACTORIES,
    ContextBuilder,
    register_connection_factory,
    resolve_factory_class,
)

__all__ = [
    "CONNECTION_FACTORIES",
    "ContextBuilder",
    "register_connection_factory",
    "resolve_factory_class",
]
