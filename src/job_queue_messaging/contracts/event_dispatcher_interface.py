"""Defines the contract for the host event dispatcher."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Type


class IEventDispatcher(ABC):
    """Routes host framework events to registered listeners."""

    @abstractmethod
    def listen(self, event_type: Type[Any], listener: Callable[[Any], None]) -> None:
        """Register ``listener`` for events of ``event_type``."""

    @abstractmethod
    def dispatch(self, event: Any) -> None:
        """Deliver ``event`` to every listener registered for its type."""
