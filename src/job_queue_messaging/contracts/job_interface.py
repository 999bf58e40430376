"""Defines the contract for a job received from the queue."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Union


class IJob(ABC):
    """Wraps one received message so it can be acknowledged, failed or released."""

    @abstractmethod
    def get_job_id(self) -> Optional[str]:
        """Return the identifier of the job."""

    @abstractmethod
    def get_raw_body(self) -> bytes:
        """Return the message body as received."""

    @abstractmethod
    def payload(self) -> Dict[str, Any]:
        """Return the decoded job payload."""

    @abstractmethod
    def attempts(self) -> int:
        """Return how many times the job has been attempted."""

    @abstractmethod
    def delete(self) -> None:
        """Remove the job from the queue."""

    @abstractmethod
    def release(self, delay: Union[int, float, timedelta, datetime] = 0) -> None:
        """Put the job back on the queue after ``delay``."""

    @abstractmethod
    def fail(self) -> None:
        """Reject the job without putting it back on the queue."""
