"""Worker lifecycle events and a minimal dispatcher for hosts without one."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, List, Type

from job_queue_messaging.contracts import IEventDispatcher


@dataclass(frozen=True)
class WorkerStopping:
    """Emitted by the host worker loop right before it exits."""

    status: int = 0


class EventDispatcher(IEventDispatcher):
    """Calls listeners registered for an event's exact type, in registration order."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[Type[Any], List[Callable[[Any], None]]] = defaultdict(list)
        self.logger = logging.getLogger(__name__)

    def listen(self, event_type: Type[Any], listener: Callable[[Any], None]) -> None:
        self._listeners[event_type].append(listener)

    def dispatch(self, event: Any) -> None:
        listeners = self._listeners.get(type(event), [])
        self.logger.debug("Dispatching %s to %d listener(s)", type(event).__name__, len(listeners))
        for listener in listeners:
            listener(event)

    def has_listeners(self, event_type: Type[Any]) -> bool:
        return bool(self._listeners.get(event_type))
