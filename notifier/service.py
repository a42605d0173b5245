"""
Notification service: the single entry point for sending notifications.

The service keeps a history of everything sent and pushes each notification
into its observable, which runs the whole cascade (observers, then the
engine's strategies) before send_notification() returns.

Key points:
- Callers build the content (and its decorators) before handing it over
- Publishing never names a listener; observers are attached to the observable
- Concurrent sends are serialized so observers always read the notification
  that triggered them
- A send made from inside an observer waits for the current cascade
"""

import logging
import threading
from collections import deque
from typing import Optional

from notifier.content import NotificationContent
from notifier.observable import NotificationObservable, ObserverFailure

logger = logging.getLogger("notification_service")


class NotificationService:
    """
    Stores notifications and broadcasts them through an observable.

    Example:
        service = NotificationService()
        observable = service.observable
        observable.subscribe(NotificationLogger(observable))
        service.send_notification(SimpleNotification("Order shipped"))
    """

    def __init__(self, observable: Optional[NotificationObservable] = None):
        """
        Args:
            observable: Observable to publish into. A new one is created if
                not provided.
        """
        self._observable = observable or NotificationObservable()
        self._history: list[NotificationContent] = []
        self._send_lock = threading.RLock()
        # Only touched while holding _send_lock
        self._dispatching = False
        self._pending: deque[tuple[int, NotificationContent]] = deque()

    @property
    def observable(self) -> NotificationObservable:
        return self._observable

    def send_notification(self, notification: NotificationContent) -> list[ObserverFailure]:
        """
        Record a notification and notify every observer.

        Blocks until all observers (and their strategies) have run. A
        notification sent by an observer from inside update() is queued and
        broadcast after the current cascade finishes, so every observer sees
        the outer notification first.

        Returns:
            Observer failures isolated by the observable, if it is not fail-fast.
            A queued send returns an empty list; its failures are reported by
            the send that drains it.
        """
        with self._send_lock:
            self._history.append(notification)
            number = len(self._history)

            if self._dispatching:
                self._pending.append((number, notification))
                logger.debug(f"Queued notification #{number} until the current cascade finishes")
                return []

            self._dispatching = True
            try:
                failures = self._broadcast(number, notification)
                while self._pending:
                    failures.extend(self._broadcast(*self._pending.popleft()))
            finally:
                self._dispatching = False
                if self._pending:
                    logger.warning(f"Dropped {len(self._pending)} queued notification(s) after an observer error")
                    self._pending.clear()

        return failures

    def _broadcast(self, number: int, notification: NotificationContent) -> list[ObserverFailure]:
        logger.info(f"Sending notification #{number}")
        failures = self._observable.set_notification(notification)
        if failures:
            logger.warning(f"{len(failures)} observer(s) failed for notification #{number}")
        return failures

    def get_history(self) -> list[NotificationContent]:
        """All notifications sent so far, oldest first."""
        with self._send_lock:
            return self._history.copy()

    def get_history_count(self) -> int:
        return len(self._history)

    def clear_history(self) -> None:
        with self._send_lock:
            self._history.clear()


# Module-level instance for callers that want one shared stream.
# Prefer constructing a NotificationService and passing it around.
_default_service: Optional[NotificationService] = None


def get_notification_service() -> NotificationService:
    """Get the default notification service, creating it on first use."""
    global _default_service
    if _default_service is None:
        _default_service = NotificationService()
    return _default_service


def reset_notification_service() -> NotificationService:
    """Replace the default notification service (useful for testing)."""
    global _default_service
    _default_service = NotificationService()
    return _default_service
