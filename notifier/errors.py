"""
Exceptions raised by the notification pipeline.

Delivery and observer failures are normally isolated and reported as data
(see DeliveryResult and ObserverFailure). These exceptions are what the
individual pieces raise before that isolation happens.
"""


class NotifierError(Exception):
    """Base class for all pipeline errors."""


class NoNotificationError(NotifierError, LookupError):
    """Raised when content is read from an observable that has none yet."""


class DeliveryError(NotifierError):
    """Raised by a delivery strategy when its channel could not be reached."""

    def __init__(self, channel: str, recipient: str, reason: str):
        self.channel = channel
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"{channel} delivery to {recipient} failed: {reason}")


class ConfigError(NotifierError):
    """Raised when a pipeline configuration cannot be loaded."""


class DeliveryTimeoutError(DeliveryError):
    """Raised when a strategy did not finish within its time limit."""
