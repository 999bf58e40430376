"""Exception hierarchy for the job queue messaging package."""


class QueueMessagingError(Exception):
    """Base exception for job queue messaging failures."""


class ConfigurationError(QueueMessagingError, ValueError):
    """Raised when the queue connection is misconfigured. Never retried."""


class TransportError(QueueMessagingError, RuntimeError):
    """Raised when the broker connection fails and the error policy is fail-fast."""


class DeliveryDelayNotSupportedError(QueueMessagingError):
    """Raised when a delayed publish is requested without a delay strategy."""
