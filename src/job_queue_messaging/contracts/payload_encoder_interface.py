"""Defines the contract for encoding job payloads."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class IPayloadEncoder(ABC):
    """Converts jobs to message bodies and back."""

    @abstractmethod
    def encode(self, job: Any, data: Any = None) -> bytes:
        """Serialize ``job`` and its ``data`` into a message body."""

    @abstractmethod
    def decode(self, payload: bytes) -> Dict[str, Any]:
        """Convert a message body back into a payload mapping."""
