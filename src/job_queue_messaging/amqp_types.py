"""Value types describing AMQP destinations and messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

DELIVERY_MODE_NON_PERSISTENT = 1
DELIVERY_MODE_PERSISTENT = 2

DEFAULT_CONTENT_TYPE = "application/json"


@dataclass
class ExchangeSpec:
    """Describes an exchange to declare and publish to."""

    name: str
    type: str = "direct"
    arguments: Dict[str, Any] = field(default_factory=dict)
    passive: bool = False
    durable: bool = False
    auto_delete: bool = False


@dataclass
class QueueSpec:
    """Describes a queue to declare, bind and consume from."""

    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    passive: bool = False
    durable: bool = False
    exclusive: bool = False
    auto_delete: bool = False


@dataclass
class AmqpMessage:
    """A message travelling to or from the broker.

    ``properties`` holds the AMQP basic properties (``content_type``, ``correlation_id``,
    ``delivery_mode`` ...) while ``headers`` holds the application headers table.
    ``delivery_tag`` and ``redelivered`` are only populated on received messages.
    """

    body: bytes
    properties: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, Any] = field(default_factory=dict)
    routing_key: str = ""
    delivery_tag: Optional[int] = None
    redelivered: bool = False

    @property
    def correlation_id(self) -> Optional[str]:
        return self.properties.get("correlation_id")

    @correlation_id.setter
    def correlation_id(self, value: Optional[str]) -> None:
        self.properties["correlation_id"] = value

    @property
    def content_type(self) -> Optional[str]:
        return self.properties.get("content_type")

    @content_type.setter
    def content_type(self, value: Optional[str]) -> None:
        self.properties["content_type"] = value

    @property
    def delivery_mode(self) -> Optional[int]:
        return self.properties.get("delivery_mode")

    @delivery_mode.setter
    def delivery_mode(self, value: Optional[int]) -> None:
        self.properties["delivery_mode"] = value

    def get_header(self, key: str, default: Any = None) -> Any:
        return self.headers.get(key, default)

    def set_header(self, key: str, value: Any) -> None:
        self.headers[key] = value
