"""Worker lifecycle events."""

from .worker_events import EventDispatcher, WorkerStopping

__all__ = ["EventDispatcher", "WorkerStopping"]
