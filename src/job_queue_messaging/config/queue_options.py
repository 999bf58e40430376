"""Provides queue, exchange and receive options for the RabbitMQ queue client."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from job_queue_messaging.exceptions import ConfigurationError

DEFAULT_QUEUE_NAME = "default"
RECEIVE_METHOD_BASIC_GET = "basic_get"
RECEIVE_METHOD_BASIC_CONSUME = "basic_consume"

SleepOnError = Union[int, float, bool]
DEFAULT_SLEEP_ON_ERROR = 5


def parse_sleep_on_error(raw: Any) -> SleepOnError:
    """Normalise ``sleep_on_error`` to non-negative seconds, or ``False`` for fail-fast."""
    if raw is None:
        return DEFAULT_SLEEP_ON_ERROR
    if raw is False:
        return False
    if raw is True:
        raise ConfigurationError("sleep_on_error must be a number of seconds or false.")

    try:
        seconds = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid sleep_on_error value: {raw!r}") from exc

    if not math.isfinite(seconds) or seconds < 0:
        raise ConfigurationError(f"sleep_on_error must be a finite, non-negative number: {raw!r}")
    return int(seconds) if seconds.is_integer() else seconds


def decode_arguments(raw: Union[None, str, Mapping[str, Any]], owner: str) -> Dict[str, Any]:
    """Decode declaration arguments given either as a JSON object string or a mapping."""
    if raw is None or raw == "":
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)

    try:
        decoded = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Failed to decode {owner} arguments as JSON.") from exc

    if not isinstance(decoded, dict):
        raise ConfigurationError(f"The {owner} arguments must decode to a JSON object.")
    return decoded


@dataclass(frozen=True)
class QueueOptions:
    """Queue declaration options.

    ``declare`` controls whether the queue is declared on the broker at all, and ``bind``
    whether it is bound to the exchange using the queue name as binding key.
    """

    name: str = DEFAULT_QUEUE_NAME
    arguments: Dict[str, Any] = field(default_factory=dict)
    passive: bool = False
    durable: bool = True
    exclusive: bool = False
    auto_delete: bool = False
    declare: bool = True
    bind: bool = True

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> QueueOptions:
        config = config or {}
        return cls(
            name=config.get("name") or DEFAULT_QUEUE_NAME,
            arguments=decode_arguments(config.get("arguments"), "queue"),
            passive=bool(config.get("passive", False)),
            durable=bool(config.get("durable", True)),
            exclusive=bool(config.get("exclusive", False)),
            auto_delete=bool(config.get("auto_delete", False)),
            declare=bool(config.get("declare", True)),
            bind=bool(config.get("bind", True)),
        )


@dataclass(frozen=True)
class ExchangeOptions:
    """Exchange declaration options. An empty ``name`` falls back to the queue name."""

    name: str = ""
    type: str = "direct"
    arguments: Dict[str, Any] = field(default_factory=dict)
    passive: bool = False
    durable: bool = True
    auto_delete: bool = False
    declare: bool = True

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> ExchangeOptions:
        config = config or {}
        return cls(
            name=config.get("name") or "",
            type=config.get("type") or "direct",
            arguments=decode_arguments(config.get("arguments"), "exchange"),
            passive=bool(config.get("passive", False)),
            durable=bool(config.get("durable", True)),
            auto_delete=bool(config.get("auto_delete", False)),
            declare=bool(config.get("declare", True)),
        )


@dataclass(frozen=True)
class ReceiveOptions:
    """How ``pop`` fetches messages. ``timeout`` is in milliseconds."""

    method: str = RECEIVE_METHOD_BASIC_GET
    timeout: int = 3000

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> ReceiveOptions:
        config = config or {}
        method = config.get("method", RECEIVE_METHOD_BASIC_GET)
        if method not in (RECEIVE_METHOD_BASIC_GET, RECEIVE_METHOD_BASIC_CONSUME):
            raise ConfigurationError(f"Unsupported receive method: {method!r}")
        return cls(method=method, timeout=int(config.get("timeout", 3000)))

    @property
    def blocking(self) -> bool:
        return self.method == RECEIVE_METHOD_BASIC_CONSUME


@dataclass(frozen=True)
class QueueClientConfig:
    """Static configuration of a ``RabbitMQQueue``.

    ``sleep_on_error`` is the number of seconds to pause after a reported connection
    error, or ``False`` to raise instead.
    """

    queue: QueueOptions = field(default_factory=QueueOptions)
    exchange: ExchangeOptions = field(default_factory=ExchangeOptions)
    receive: ReceiveOptions = field(default_factory=ReceiveOptions)
    sleep_on_error: SleepOnError = DEFAULT_SLEEP_ON_ERROR

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> QueueClientConfig:
        options = config.get("options") or {}
        return cls(
            queue=QueueOptions.from_config(options.get("queue")),
            exchange=ExchangeOptions.from_config(options.get("exchange")),
            receive=ReceiveOptions.from_config(config.get("receive")),
            sleep_on_error=parse_sleep_on_error(config.get("sleep_on_error")),
        )

    @property
    def fail_fast(self) -> bool:
        return self.sleep_on_error is False
