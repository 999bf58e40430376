"""Defines the transport-agnostic job queue contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional, Union

from .job_interface import IJob

Delay = Union[int, float, timedelta, datetime]


class IQueue(ABC):
    """A queue that jobs can be pushed to and popped from."""

    @abstractmethod
    def size(self, queue_name: Optional[str] = None) -> Optional[int]:
        """Return the number of messages waiting on the queue."""

    @abstractmethod
    def push(self, job: Any, data: Any = None, queue_name: Optional[str] = None) -> Optional[str]:
        """Push a new job onto the queue."""

    @abstractmethod
    def push_raw(
        self,
        payload: bytes,
        queue_name: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        """Push an already encoded payload onto the queue."""

    @abstractmethod
    def later(
        self,
        delay: Delay,
        job: Any,
        data: Any = None,
        queue_name: Optional[str] = None,
    ) -> Optional[str]:
        """Push a new job onto the queue after ``delay``."""

    @abstractmethod
    def release(
        self,
        delay: Delay,
        job: Any,
        data: Any,
        queue_name: Optional[str],
        attempts: int = 0,
    ) -> Optional[str]:
        """Push a reserved job back onto the queue with an attempt count."""

    @abstractmethod
    def pop(self, queue_name: Optional[str] = None) -> Optional[IJob]:
        """Pop the next job off the queue."""
