"""Defines the contract for connection factories producing broker contexts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from .broker_context_interface import IBrokerContext


class IConnectionFactory(ABC):
    """Creates broker contexts from a connection configuration mapping.

    Implementations are constructed with a single mapping holding the keys ``dsn``,
    ``host``, ``port``, ``user``, ``pass``, ``vhost``, ``ssl_on``, ``ssl_verify``,
    ``ssl_cacert``, ``ssl_cert``, ``ssl_key``, ``ssl_passphrase``, ``receive_method``,
    ``heartbeat``, ``read_timeout`` and ``write_timeout``.
    """

    @abstractmethod
    def __init__(self, config: Mapping[str, Any]) -> None:
        """Store the connection configuration."""

    @abstractmethod
    def create_context(self) -> IBrokerContext:
        """Open a new, independent broker context."""
