"""
Notification pipeline.

This package composes notifications and dispatches them:
- Content is built from plain text wrapped in decorators
- A service records each notification and publishes it to an observable
- Observers (a logger, a delivery engine) pull the content when notified
- The engine fans the content out to its delivery strategies
"""

from notifier.content import (
    NotificationContent,
    NotificationDecorator,
    SignatureDecorator,
    SimpleNotification,
    TimeStampDecorator,
    decorate,
)
from notifier.errors import (
    ConfigError,
    DeliveryError,
    DeliveryTimeoutError,
    NoNotificationError,
    NotifierError,
)
from notifier.observable import NotificationObservable, ObservableState, Observer, ObserverFailure
from notifier.observers import NotificationEngine, NotificationLogger
from notifier.service import NotificationService, get_notification_service, reset_notification_service
from notifier.strategies import (
    ChannelType,
    DeliveryResult,
    DeliveryTicket,
    EmailStrategy,
    LoggingSink,
    MemorySink,
    NotificationStrategy,
    PopUpStrategy,
    SMSStrategy,
)

__all__ = [
    "NotificationContent",
    "NotificationDecorator",
    "SignatureDecorator",
    "SimpleNotification",
    "TimeStampDecorator",
    "decorate",
    "ConfigError",
    "DeliveryError",
    "DeliveryTimeoutError",
    "NoNotificationError",
    "NotifierError",
    "NotificationObservable",
    "ObservableState",
    "Observer",
    "ObserverFailure",
    "NotificationEngine",
    "NotificationLogger",
    "NotificationService",
    "get_notification_service",
    "reset_notification_service",
    "ChannelType",
    "DeliveryResult",
    "DeliveryTicket",
    "EmailStrategy",
    "LoggingSink",
    "MemorySink",
    "NotificationStrategy",
    "PopUpStrategy",
    "SMSStrategy",
]
