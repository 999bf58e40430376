"""Broker-native delayed delivery strategies."""

from typing import Dict, Type

from job_queue_messaging.contracts import IDelayStrategy

from .delayed_plugin_delay_strategy import DelayedPluginDelayStrategy
from .dlx_delay_strategy import DlxDelayStrategy

DELAY_STRATEGIES: Dict[str, Type[IDelayStrategy]] = {
    "dlx": DlxDelayStrategy,
    "delayed_plugin": DelayedPluginDelayStrategy,
}

__all__ = ["DELAY_STRATEGIES", "DelayedPluginDelayStrategy", "DlxDelayStrategy"]
