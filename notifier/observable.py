"""
Observable holding the current notification.

Observers subscribe to a NotificationObservable and are told when the current
notification changes. They are not handed the notification: each one holds a
reference to the observable and pulls the content inside update(). Adding a
new listener therefore never touches the code that publishes.

Design decisions:
- Synchronous delivery on the caller's thread
- Observers are notified in the order they subscribed
- The same observer can be subscribed twice (and is then notified twice)
- The observer list is only locked while it is copied or changed, never
  while an observer runs
- Observer failures either propagate (fail_fast) or are logged, recorded
  and skipped
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Protocol

from notifier.content import NotificationContent
from notifier.errors import NoNotificationError

logger = logging.getLogger("notification_observable")


class Observer(Protocol):
    """Reacts to a change of the observable's current notification."""

    def update(self) -> None:  # pragma: no cover - Protocol
        ...


class ObservableState(str, Enum):
    """Lifecycle of an observable. There is no terminal state."""
    EMPTY = "EMPTY"      # No notification set yet
    ACTIVE = "ACTIVE"    # A current notification is present


@dataclass
class ObserverFailure:
    """An observer that raised while being notified."""
    observer: Observer
    error: Exception
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{type(self.observer).__name__} failed: {self.error}"


class NotificationObservable:
    """
    Holds the current notification and the observers watching it.

    Example usage:
        observable = NotificationObservable()
        observable.subscribe(NotificationLogger(observable))
        observable.set_notification(SimpleNotification("Order shipped"))
    """

    def __init__(self, fail_fast: bool = True):
        """
        Args:
            fail_fast: If True, an exception raised by an observer stops the
                notification and propagates to the caller. If False, it is
                logged and recorded, and the remaining observers still run.
        """
        self.fail_fast = fail_fast
        self._observers: list[Observer] = []
        self._lock = threading.Lock()
        self._current: Optional[NotificationContent] = None

    @property
    def state(self) -> ObservableState:
        if self._current is None:
            return ObservableState.EMPTY
        return ObservableState.ACTIVE

    @property
    def observers(self) -> list[Observer]:
        """Snapshot of subscribed observers, in subscription order."""
        with self._lock:
            return list(self._observers)

    def subscribe(self, observer: Observer) -> None:
        """Add an observer. Duplicates are not checked."""
        with self._lock:
            self._observers.append(observer)
        logger.debug(f"Subscribed {type(observer).__name__}")

    def unsubscribe(self, observer: Observer) -> bool:
        """
        Remove the first subscription of an observer.

        Returns:
            True if the observer was found and removed, False otherwise
        """
        with self._lock:
            try:
                self._observers.remove(observer)
            except ValueError:
                return False
        logger.debug(f"Unsubscribed {type(observer).__name__}")
        return True

    def get_subscriber_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def set_notification(self, notification: NotificationContent) -> list[ObserverFailure]:
        """
        Make a notification current and notify every observer.

        Returns:
            Failures isolated during notification (always empty in fail_fast mode)
        """
        self._current = notification
        return self.notify_observers()

    def notify_observers(self) -> list[ObserverFailure]:
        """
        Call update() on each observer, in subscription order.

        Observers subscribed or removed while this runs take effect from the
        next notification.
        """
        failures: list[ObserverFailure] = []

        for observer in self.observers:
            try:
                observer.update()
            except Exception as e:
                logger.error(f"Observer {type(observer).__name__} raised: {e}")
                if self.fail_fast:
                    raise
                failures.append(ObserverFailure(observer=observer, error=e))

        return failures

    def get_notification(self) -> Optional[NotificationContent]:
        """The current notification, or None before the first one."""
        return self._current

    def get_notification_content(self) -> str:
        """
        Render the current notification.

        Raises:
            NoNotificationError: If no notification has been set yet
        """
        if self._current is None:
            raise NoNotificationError("No notification has been set on this observable")
        return self._current.get_content()
