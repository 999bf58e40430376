"""Connection parameters for building broker contexts."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Type, Union

from job_queue_messaging.exceptions import ConfigurationError

DEFAULT_FACTORY = "pika"
DEFAULT_DELAY_STRATEGY = "dlx"
DEFAULT_RECEIVE_METHOD = "basic_get"


@dataclass(frozen=True)
class SslParams:
    """TLS options passed through to the connection factory."""

    ssl_on: bool = False
    verify_peer: bool = True
    cafile: Optional[str] = None
    local_cert: Optional[str] = None
    local_key: Optional[str] = None
    passphrase: Optional[str] = None

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> SslParams:
        config = config or {}
        return cls(
            ssl_on=bool(config.get("ssl_on", False)),
            verify_peer=bool(config.get("verify_peer", True)),
            cafile=config.get("cafile"),
            local_cert=config.get("local_cert"),
            local_key=config.get("local_key"),
            passphrase=config.get("passphrase"),
        )


@dataclass(frozen=True)
class Timeouts:
    """Heartbeat interval and socket timeouts, in seconds."""

    heartbeat: int = 0
    read: float = 3
    write: float = 3

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> Timeouts:
        if not config:
            return cls()
        return cls(
            heartbeat=int(config.get("heartbeat", 0)),
            read=config.get("read", 3),
            write=config.get("write", 3),
        )


@dataclass(frozen=True)
class ConnectionSpec:
    """Immutable description of how to reach the broker.

    ``factory_class`` names the connection factory: a registered short name such as
    ``"pika"``, a dotted import path, or the factory class itself. ``from_config``
    requires it to be configured; the ``"pika"`` default applies only when the spec is
    constructed directly. When ``dsn`` is not
    configured the ``RABBITMQ_URL`` environment variable is used, and when neither is set
    the discrete ``host``/``port``/``login`` fields apply.
    """

    factory_class: Union[str, Type[Any]] = DEFAULT_FACTORY
    dsn: Optional[str] = None
    host: str = "127.0.0.1"
    port: int = 5672
    login: str = "guest"
    password: str = "guest"
    vhost: str = "/"
    ssl_params: SslParams = field(default_factory=SslParams)
    receive_method: str = DEFAULT_RECEIVE_METHOD
    timeouts: Timeouts = field(default_factory=Timeouts)
    delay_strategy: str = DEFAULT_DELAY_STRATEGY

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> ConnectionSpec:
        if not config.get("factory_class"):
            raise ConfigurationError("The factory_class option is missing though it is required.")

        receive = config.get("receive") or {}
        dsn = (config.get("dsn") or os.getenv("RABBITMQ_URL") or "").strip() or None

        try:
            port = int(config.get("port", 5672))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid RabbitMQ port: {config.get('port')!r}") from exc

        return cls(
            factory_class=config["factory_class"],
            dsn=dsn,
            host=config.get("host", "127.0.0.1"),
            port=port,
            login=config.get("login", "guest"),
            password=config.get("password", "guest"),
            vhost=config.get("vhost", "/"),
            ssl_params=SslParams.from_config(config.get("ssl_params")),
            receive_method=receive.get("method", DEFAULT_RECEIVE_METHOD),
            timeouts=Timeouts.from_config(config.get("timeouts")),
            delay_strategy=config.get("delay_strategy", DEFAULT_DELAY_STRATEGY),
        )

    def to_factory_config(self) -> Dict[str, Any]:
        """Map the spec onto the keys understood by connection factories."""
        return {
            "dsn": self.dsn,
            "host": self.host,
            "port": self.port,
            "user": self.login,
            "pass": self.password,
            "vhost": self.vhost,
            "ssl_on": self.ssl_params.ssl_on,
            "ssl_verify": self.ssl_params.verify_peer,
            "ssl_cacert": self.ssl_params.cafile,
            "ssl_cert": self.ssl_params.local_cert,
            "ssl_key": self.ssl_params.local_key,
            "ssl_passphrase": self.ssl_params.passphrase,
            "receive_method": self.receive_method,
            "heartbeat": self.timeouts.heartbeat,
            "read_timeout": self.timeouts.read,
            "write_timeout": self.timeouts.write,
        }
